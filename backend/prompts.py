"""Prompts sent to Gemini for the improve, summarize and translate calls."""

IMPROVE_PROMPT = """Improve the following text. Fix grammar and punctuation and rebuild the sentences so that it reads smoothly and coherently, preserving the original meaning. Return only the corrected text without any introduction or comment."""

SUMMARY_PROMPT = """Write a very short, concise summary of the following text, highlighting only the main key points:"""

TRANSLATE_PROMPT = """Translate the following text into {language}. If the text is already in {language}, return it unchanged. Return only the translated or original text without any introduction or comment."""

SEPARATOR = "\n\n---\n\n"


def build_improve_prompt(text: str) -> str:
    return f"{IMPROVE_PROMPT}{SEPARATOR}{text}"


def build_summary_prompt(improved_text: str) -> str:
    return f"{SUMMARY_PROMPT}{SEPARATOR}{improved_text}"


def build_translate_prompt(text: str, language: str) -> str:
    return f"{TRANSLATE_PROMPT.format(language=language)}{SEPARATOR}{text}"


# Shown when a step gets an empty reply from the model
IMPROVE_EMPTY = "Improving the text failed or returned empty."
SUMMARY_EMPTY = "Summarization failed or returned empty."
TRANSLATE_EMPTY = "Translation failed or returned empty."
