"""Target languages and output file naming."""

from __future__ import annotations

from pathlib import PurePath
from typing import Dict, List, Optional

# Language name -> code used in output file names
LANGUAGE_CODES: Dict[str, str] = {
    "Japanese": "ja",
    "Spanish": "es",
    "Russian": "ru",
    "French": "fr",
    "German": "de",
    "Chinese (Simplified)": "zh-CN",
    "Portuguese (Brazil)": "pt-BR",
    "Korean": "ko",
    "Italian": "it",
    "Vietnamese": "vi",
    "Arabic": "ar",
    "Hindi": "hi",
}

TARGET_LANGUAGES: List[str] = [
    "English",
    *LANGUAGE_CODES,
    "Chinese (Traditional)",
    "Dutch",
    "Indonesian",
    "Polish",
    "Thai",
    "Turkish",
]


def language_code(language: str) -> str:
    """
    Look up the file-name code for a language.

    Unmapped names fall back to their first two characters, lowercased.
    This is a best-effort guess, not a validated ISO 639 code.
    """
    code = LANGUAGE_CODES.get(language)
    if code:
        return code
    return language[:2].lower()


def output_file_name(original_name: str, language: str) -> str:
    """Derive ``<base>.<code>.srt`` from the uploaded file name."""
    base = PurePath(original_name).name
    if "." in base:
        base = base[:base.rindex(".")]
    return f"{base}.{language_code(language)}.srt"


def selectable_languages(original_language: Optional[str] = None) -> List[str]:
    """Target languages minus the document's own language (case-insensitive)."""
    if not original_language:
        return list(TARGET_LANGUAGES)
    excluded = original_language.strip().lower()
    return [lang for lang in TARGET_LANGUAGES if lang.lower() != excluded]
