"""Chunk translation through the LLM backend."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .errors import BackendUnavailable, MalformedTranslationOutput
from .llm_client import TranslationBackend
from .models import SrtEntry

logger = logging.getLogger(__name__)

# Must never occur in ordinary subtitle text
BATCH_SEPARATOR = "|||---|||"

UNKNOWN_LANGUAGE = "Unknown"

# Entries sampled for language detection
DETECTION_SAMPLE_SIZE = 20


def build_translation_prompt(texts: Sequence[str], target_language: str) -> str:
    """Build the prompt asking for every block to be translated in place."""
    joined = BATCH_SEPARATOR.join(texts)

    return f"""You are an expert subtitle translator.
Your task is to translate the following text blocks into {target_language}.
The text blocks are separated by a special delimiter: "{BATCH_SEPARATOR}".
You MUST preserve this delimiter in your translated output.
Do not add any introductory phrases, explanations, or any text other than the translated blocks and their delimiters.
The number of translated blocks separated by the delimiter must be exactly the same as the number of original blocks.
Keep the original line breaks within each text block.

Here are the text blocks to translate:
---
{joined}
---
"""


def split_translation_response(response: str) -> List[str]:
    """Split a raw backend response back into translated blocks."""
    return [block.strip() for block in response.split(BATCH_SEPARATOR)]


async def translate_chunk(
    backend: TranslationBackend,
    entries: Sequence[SrtEntry],
    target_language: str,
    model: str,
) -> List[str]:
    """
    Translate one chunk of subtitle entries in a single backend request.

    Returns:
        Translated texts, same length and order as ``entries``

    Raises:
        MalformedTranslationOutput: block count differs from what was sent
        BackendUnavailable: the backend could not be reached
    """
    if not entries:
        return []

    prompt = build_translation_prompt([e.text for e in entries], target_language)

    try:
        response = await backend(prompt, model)
    except BackendUnavailable:
        raise
    except Exception as e:
        raise BackendUnavailable(f"Failed to get a valid response from the AI model: {e}") from e

    blocks = split_translation_response(response)

    if len(blocks) != len(entries):
        logger.warning(
            f"Mismatch in translated blocks for {target_language}. "
            f"Expected {len(entries)}, got {len(blocks)}."
        )
        raise MalformedTranslationOutput(len(entries), len(blocks))

    return blocks


async def detect_language(
    backend: TranslationBackend,
    entries: Sequence[SrtEntry],
    model: str,
) -> str:
    """
    Ask the backend which language the subtitles are written in.

    Returns:
        Language name in English, or ``"Unknown"`` if detection failed
    """
    if not entries:
        return UNKNOWN_LANGUAGE

    sample = "\n".join(e.text for e in entries[:DETECTION_SAMPLE_SIZE])
    prompt = (
        "Identify the language of the following subtitle text. "
        "Answer with the English name of the language only, "
        "for example \"English\" or \"Japanese\".\n\n"
        f"{sample}"
    )

    try:
        response = await backend(prompt, model)
    except BackendUnavailable as e:
        logger.warning(f"Language detection failed: {e}")
        return UNKNOWN_LANGUAGE

    language = response.strip().splitlines()[0].strip().strip('."') if response.strip() else ""
    return language or UNKNOWN_LANGUAGE
