import logging
from typing import Optional

from google import genai

from config import GEMINI_MODEL
from errors import ConfigurationError, EmptyResponseError, to_transcript_error

logger = logging.getLogger("transcript_refiner")

DEFAULT_EMPTY_MESSAGE = "The model returned an empty response."


def make_client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


class GeminiModelClient:
    """Sends one prompt to Gemini and returns the generated text.

    Holds no credential: a new SDK client is built for every call from the
    key passed in, so a cleared or replaced key is never reused. The client
    is closed once the call settles.
    """

    def __init__(self, model: str = GEMINI_MODEL):
        self.model = model

    async def invoke(
        self,
        prompt: str,
        credential: Optional[str],
        empty_message: Optional[str] = None,
    ) -> str:
        if not credential:
            raise ConfigurationError("API key is not configured.")

        client = make_client(credential)
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except Exception as e:
            error = to_transcript_error(e)
            logger.warning(f"Gemini call failed ({error.kind.value}): {error.message}")
            raise error from e
        finally:
            await client.aio.aclose()

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise EmptyResponseError(empty_message or DEFAULT_EMPTY_MESSAGE)
        return text
