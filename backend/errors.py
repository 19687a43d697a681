"""Failure taxonomy and the classification of remote model failures."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    INVALID_CREDENTIAL = "invalid_credential"
    EMPTY_RESPONSE = "empty_response"
    TRANSPORT = "transport"
    LOCAL_INPUT = "local_input"
    BUSY = "busy"


class TranscriptError(Exception):
    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TranscriptError):
    """Credential absent or its storage unreachable. Not fixed by retrying."""

    kind = ErrorKind.CONFIGURATION


class InvalidCredentialError(TranscriptError):
    """The model service rejected the credential; it must be re-entered."""

    kind = ErrorKind.INVALID_CREDENTIAL


class EmptyResponseError(TranscriptError):
    kind = ErrorKind.EMPTY_RESPONSE


class TransportError(TranscriptError):
    kind = ErrorKind.TRANSPORT


class LocalInputError(TranscriptError):
    """Bad input caught before any remote call."""

    kind = ErrorKind.LOCAL_INPUT


class OperationInProgressError(TranscriptError):
    kind = ErrorKind.BUSY


# Substrings the Gemini API puts in authentication/authorization failures.
# "Requested entity was not found" is what a revoked or unknown key yields.
INVALID_CREDENTIAL_SIGNATURES = (
    "Requested entity was not found",
    "API key not valid",
    "API_KEY_INVALID",
    "PERMISSION_DENIED",
    "UNAUTHENTICATED",
)

_AUTH_STATUS_CODES = (401, 403)


def _status_code(exc: BaseException) -> Optional[int]:
    code = getattr(exc, "code", None)
    return code if isinstance(code, int) else None


def classify_failure(exc: BaseException) -> ErrorKind:
    """Maps a raw model-call failure to INVALID_CREDENTIAL or TRANSPORT.

    Already classified errors keep their kind.
    """
    if isinstance(exc, TranscriptError):
        return exc.kind

    if _status_code(exc) in _AUTH_STATUS_CODES:
        return ErrorKind.INVALID_CREDENTIAL

    message = str(exc)
    if any(signature in message for signature in INVALID_CREDENTIAL_SIGNATURES):
        return ErrorKind.INVALID_CREDENTIAL

    return ErrorKind.TRANSPORT


def to_transcript_error(exc: BaseException) -> TranscriptError:
    """Wraps a raw failure into the matching TranscriptError subclass."""
    if isinstance(exc, TranscriptError):
        return exc

    message = str(exc) or exc.__class__.__name__
    if classify_failure(exc) is ErrorKind.INVALID_CREDENTIAL:
        return InvalidCredentialError(message)
    return TransportError(message)
