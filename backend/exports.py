from typing import NamedTuple, Optional

from errors import LocalInputError

EXPORT_FIELDS = ("improved_text", "summary")


class Export(NamedTuple):
    filename: str
    content: str


def language_suffix(language: str) -> str:
    return "_".join(language.strip().lower().split())


def export_filename(field: str, language: Optional[str] = None) -> str:
    """improved_text.txt, or improved_text_italian.txt once translated."""
    if language:
        return f"{field}_{language_suffix(language)}.txt"
    return f"{field}.txt"


def build_export(result, field: str, language: str) -> Export:
    if field not in EXPORT_FIELDS:
        raise LocalInputError(f"Unknown download {field!r}.")
    if result is None:
        raise LocalInputError("There is nothing to download yet.")

    translated = getattr(result, f"translated_{field}")
    if translated is not None:
        return Export(export_filename(field, language), translated)
    return Export(export_filename(field), getattr(result, field))
