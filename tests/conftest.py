"""
Shared test fixtures.

Tests never reach Gemini: the pipeline gets a scripted fake model client,
and the controller a memory credential store.
"""

import os
import sys
from pathlib import Path

import pytest

# Backend modules import each other flat, as when run from backend/
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "backend"))

# Keep main.py's module-level app off the user's real config dir
os.environ["TRANSCRIPT_CREDENTIAL_SOURCE"] = "memory"
os.environ.setdefault("TRANSCRIPT_TARGET_LANGUAGE", "Italian")

from controller import TranscriptController  # noqa: E402
from credentials import MemoryCredentialStore  # noqa: E402
from errors import EmptyResponseError  # noqa: E402
from pipeline import TranscriptPipeline  # noqa: E402
from prompts import IMPROVE_PROMPT, SUMMARY_PROMPT  # noqa: E402


class FakeModelClient:
    """Answers by prompt type; an Exception in the script is raised instead
    and an empty reply fails the way GeminiModelClient does.

    Translation replies receive the text being translated, so tests can
    fail one of the two parallel calls.
    """

    def __init__(self, improve="Improved text.", summary="Short summary.", translate=None):
        self.improve = improve
        self.summary = summary
        self.translate = translate if translate is not None else (lambda text: f"IT: {text}")
        self.calls = []

    async def invoke(self, prompt, credential, empty_message=None):
        self.calls.append((prompt, credential))
        if prompt.startswith(IMPROVE_PROMPT):
            reply = self.improve
        elif prompt.startswith(SUMMARY_PROMPT):
            reply = self.summary
        else:
            text = prompt.rsplit("\n\n---\n\n", 1)[-1]
            reply = self.translate(text)
        if isinstance(reply, Exception):
            raise reply
        if not reply:
            raise EmptyResponseError(empty_message or "empty")
        return reply

    def prompts(self):
        return [prompt for prompt, _ in self.calls]


@pytest.fixture
def fake_client():
    return FakeModelClient()


@pytest.fixture
def store():
    return MemoryCredentialStore("test-key")


@pytest.fixture
def make_controller(store):
    """
    Factory for controllers around a fake client.

    Usage:
        controller = make_controller(FakeModelClient(summary=TransportError("x")))
    """

    def _create(client=None, credential_store=None, language="Italian"):
        pipeline = TranscriptPipeline(client or FakeModelClient(), language)
        return TranscriptController(credential_store or store, pipeline)

    return _create
