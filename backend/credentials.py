"""Storage for the single API credential the service calls Gemini with."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from errors import ConfigurationError, LocalInputError

logger = logging.getLogger("transcript_refiner")


def _clean(value: Optional[str]) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise LocalInputError("Please enter an API key.")
    return cleaned


class MemoryCredentialStore:
    """Keeps the credential in process memory only."""

    source = "memory"
    writable = True

    def __init__(self, value: Optional[str] = None):
        self._value = value.strip() if value and value.strip() else None

    @property
    def available(self) -> bool:
        return True

    def get(self) -> Optional[str]:
        return self._value

    def set(self, value: str) -> None:
        self._value = _clean(value)

    def clear(self) -> None:
        self._value = None


class FileCredentialStore:
    """Persists the credential as JSON in the user config directory.

    get() never raises: an unreadable store reports None and flips
    `available` to False so the controller can show a fatal error.
    """

    source = "file"
    writable = True

    def __init__(self, path: Path):
        self.path = Path(path)
        self._available = True

    @property
    def available(self) -> bool:
        return self._available

    def get(self) -> Optional[str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._available = True
            return None
        except OSError as e:
            logger.error(f"Credential store {self.path} not readable: {e}")
            self._available = False
            return None

        self._available = True
        try:
            value = json.loads(raw).get("api_key")
        except (ValueError, AttributeError):
            logger.warning(f"Credential store {self.path} is corrupt, ignoring it")
            return None

        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip()

    def set(self, value: str) -> None:
        cleaned = _clean(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({"api_key": cleaned}), encoding="utf-8")
            os.chmod(self.path, 0o600)
        except OSError as e:
            self._available = False
            raise ConfigurationError(f"Could not save the API key: {e}") from e
        self._available = True

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self._available = False
            raise ConfigurationError(f"Could not remove the API key: {e}") from e


class EnvCredentialStore:
    """Read-only credential supplied through the environment.

    There is no in-app entry, so a missing key is a fatal configuration
    error. clear() (eviction) hides the key until the process restarts.
    """

    source = "env"
    writable = False

    def __init__(self, variable: str):
        self.variable = variable
        self._evicted = False

    @property
    def available(self) -> bool:
        return bool(os.getenv(self.variable, "").strip())

    def get(self) -> Optional[str]:
        if self._evicted:
            return None
        value = os.getenv(self.variable, "").strip()
        return value or None

    def set(self, value: str) -> None:
        raise ConfigurationError(
            f"The API key is read from {self.variable} and cannot be changed here."
        )

    def clear(self) -> None:
        self._evicted = True


def build_credential_store(source: str, credential_file: Path, env_variable: str):
    if source == "file":
        return FileCredentialStore(credential_file)
    if source == "env":
        return EnvCredentialStore(env_variable)
    if source == "memory":
        return MemoryCredentialStore()
    raise ConfigurationError(
        f"Unknown credential source {source!r} (expected file, env or memory)."
    )
