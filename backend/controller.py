"""Application state and the sequencing of user actions.

One controller per server process: the service has a single user, a
single credential and a single result.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from errors import (
    ConfigurationError,
    ErrorKind,
    InvalidCredentialError,
    LocalInputError,
    OperationInProgressError,
    TranscriptError,
)
from exports import Export, build_export
from pipeline import ProcessedResult, TranscriptPipeline

logger = logging.getLogger("transcript_refiner")

INVALID_KEY_MESSAGE = "Your API key appears to be invalid. Please enter a valid API key to continue."


class OperationState(str, Enum):
    IDLE = "idle"
    RUNNING_STAGE1 = "running_stage1"
    RUNNING_STAGE2 = "running_stage2"


class CredentialState(str, Enum):
    ABSENT = "absent"
    # Entered or loaded, but no model call has succeeded with it yet
    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"


class AppState(BaseModel):
    input_text: str
    result: Optional[ProcessedResult] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    operation: OperationState
    credential: CredentialState
    credential_source: str
    credential_editable: bool
    fatal_error: Optional[str] = None
    target_language: str
    can_process: bool
    can_translate: bool


class TranscriptController:
    def __init__(self, store, pipeline: TranscriptPipeline):
        self.store = store
        self.pipeline = pipeline
        self.input_text = ""
        self.result: Optional[ProcessedResult] = None
        self.error: Optional[str] = None
        self.error_kind: Optional[ErrorKind] = None
        self.is_processing = False
        self.is_translating = False
        self.credential_state = (
            CredentialState.UNCONFIRMED if store.get() else CredentialState.ABSENT
        )

    # =========================================================
    # STATE
    # =========================================================
    @property
    def operation(self) -> OperationState:
        if self.is_processing:
            return OperationState.RUNNING_STAGE1
        if self.is_translating:
            return OperationState.RUNNING_STAGE2
        return OperationState.IDLE

    def fatal_error(self) -> Optional[str]:
        if not self.store.available:
            if self.store.writable:
                return "The API key storage is not accessible. Check the server configuration."
            return "API key is not configured. Please set it in your deployment environment."
        if not self.store.writable and self.store.get() is None:
            return "The configured API key was rejected. Update it in your deployment environment and restart."
        return None

    def snapshot(self) -> AppState:
        idle = self.operation is OperationState.IDLE
        has_key = self.credential_state is not CredentialState.ABSENT
        return AppState(
            input_text=self.input_text,
            result=self.result,
            error=self.error,
            error_kind=self.error_kind,
            operation=self.operation,
            credential=self.credential_state,
            credential_source=self.store.source,
            credential_editable=self.store.writable,
            fatal_error=self.fatal_error(),
            target_language=self.pipeline.target_language,
            can_process=idle and has_key and bool(self.input_text.strip()),
            can_translate=idle and has_key and self.result is not None and not self.result.is_translated,
        )

    def _fail(self, error: TranscriptError) -> TranscriptError:
        self.error = error.message
        self.error_kind = error.kind
        return error

    def _clear_error(self) -> None:
        self.error = None
        self.error_kind = None

    # =========================================================
    # CREDENTIAL
    # =========================================================
    def set_credential(self, value: str) -> AppState:
        self._ensure_idle()
        try:
            self.store.set(value)
        except TranscriptError as e:
            raise self._fail(e)
        self.credential_state = CredentialState.UNCONFIRMED
        self._clear_error()
        logger.info(f"API key saved ({self.store.source} store)")
        return self.snapshot()

    def clear_credential(self) -> AppState:
        self._ensure_idle()
        try:
            self.store.clear()
        except TranscriptError as e:
            raise self._fail(e)
        self.credential_state = CredentialState.ABSENT
        self._clear_error()
        logger.info("API key cleared")
        return self.snapshot()

    def _confirm_credential(self, credential: str) -> None:
        # Only the key the run was made with can be confirmed
        current = self.store.get()
        if current == credential:
            self.credential_state = CredentialState.CONFIRMED
        elif current is None:
            self.credential_state = CredentialState.ABSENT

    def _evict_credential(self, credential: str) -> None:
        if self.store.get() != credential:
            logger.warning("Rejected API key was already replaced, keeping the current one")
            return
        try:
            self.store.clear()
        except ConfigurationError as e:
            logger.error(f"Could not evict the rejected API key: {e.message}")
        self.credential_state = CredentialState.ABSENT
        logger.warning("API key rejected by the model service, evicted")

    def _require_credential(self) -> str:
        credential = self.store.get()
        fatal = self.fatal_error()
        if fatal:
            raise ConfigurationError(fatal)
        if not credential:
            self.credential_state = CredentialState.ABSENT
            raise ConfigurationError("Please enter your Gemini API key to continue.")
        return credential

    # =========================================================
    # INPUT
    # =========================================================
    def set_input(self, text: str) -> AppState:
        self.input_text = text or ""
        return self.snapshot()

    def check_upload_type(self, content_type: Optional[str]) -> None:
        if not (content_type or "").startswith("text/plain"):
            raise self._fail(LocalInputError("Please upload a valid .txt file."))

    def file_read_failed(self) -> LocalInputError:
        return self._fail(LocalInputError("Failed to read the file."))

    def load_file(self, filename: str, content_type: Optional[str], data: bytes) -> AppState:
        """Replaces the input with an uploaded plain-text file."""
        self.check_upload_type(content_type)
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise self.file_read_failed()

        logger.info(f"Loaded {filename or 'upload'} ({len(text)} chars)")
        self.input_text = text
        self._clear_error()
        return self.snapshot()

    def clear(self) -> AppState:
        self._ensure_idle()
        self.input_text = ""
        self.result = None
        self._clear_error()
        return self.snapshot()

    def _ensure_idle(self) -> None:
        if self.operation is not OperationState.IDLE:
            raise OperationInProgressError("Another request is still running. Please wait for it to finish.")

    # =========================================================
    # STAGES
    # =========================================================
    async def process(self) -> AppState:
        """Stage 1. The result is replaced only when both calls succeed."""
        self._ensure_idle()
        if not self.input_text.strip():
            raise self._fail(LocalInputError("Please paste some text to process."))
        try:
            credential = self._require_credential()
        except ConfigurationError as e:
            raise self._fail(e)

        self.is_processing = True
        self.result = None
        self._clear_error()
        try:
            self.result = await self.pipeline.run_stage1(self.input_text, credential)
        except InvalidCredentialError as e:
            self._evict_credential(credential)
            raise self._fail(InvalidCredentialError(INVALID_KEY_MESSAGE)) from e
        except TranscriptError as e:
            raise self._fail(e)
        finally:
            self.is_processing = False

        self._confirm_credential(credential)
        return self.snapshot()

    async def translate(self) -> AppState:
        """Stage 2. A no-op once the result carries translations."""
        self._ensure_idle()
        if self.result is None:
            raise self._fail(LocalInputError("Process a transcript before translating it."))
        if self.result.is_translated:
            return self.snapshot()
        try:
            credential = self._require_credential()
        except ConfigurationError as e:
            raise self._fail(e)

        source = self.result
        self.is_translating = True
        self._clear_error()
        try:
            self.result = await self.pipeline.run_stage2(source, credential)
        except InvalidCredentialError as e:
            self._evict_credential(credential)
            raise self._fail(InvalidCredentialError(INVALID_KEY_MESSAGE)) from e
        except TranscriptError as e:
            raise self._fail(e)
        finally:
            self.is_translating = False

        self._confirm_credential(credential)
        return self.snapshot()

    # =========================================================
    # DOWNLOAD
    # =========================================================
    def export(self, field: str) -> Export:
        return build_export(self.result, field, self.pipeline.target_language)
