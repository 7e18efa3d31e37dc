"""SRT file parsing and saving utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Optional

from .models import SrtEntry, TranslatedSrt, TIME_SEPARATOR

logger = logging.getLogger(__name__)

# Blocks are separated by an empty line; whitespace-only lines belong to the text
BLOCK_SEPARATOR = "\n\n"

DURATION_NOT_AVAILABLE = "N/A"

MAX_FILE_SIZE = 50 * 1024 * 1024

_DURATION_UNITS = (
    ("d", 24 * 60 * 60 * 1000),
    ("h", 60 * 60 * 1000),
    ("m", 60 * 1000),
    ("s", 1000),
)


def parse_srt(content: str) -> List[SrtEntry]:
    """
    Parse SRT file content into list of SrtEntry objects.

    Malformed blocks (fewer than three lines, non-numeric index, no
    ``-->`` separator, empty text) are skipped rather than reported.

    Args:
        content: Raw SRT file content as string

    Returns:
        List of parsed SrtEntry objects, empty if nothing could be parsed
    """
    if not content or not content.strip():
        return []

    content = content.lstrip("\ufeff")
    content = content.replace("\r\n", "\n").replace("\r", "\n")

    entries: List[SrtEntry] = []
    skipped = 0

    for block in content.split(BLOCK_SEPARATOR):
        lines = block.strip().split("\n")
        if len(lines) < 3:
            if block.strip():
                skipped += 1
            continue

        index_line = lines[0].strip()
        time_range = lines[1]
        text = "\n".join(lines[2:])

        if not index_line.isdecimal() or int(index_line) < 1:
            skipped += 1
            continue
        if TIME_SEPARATOR not in time_range or not text.strip():
            skipped += 1
            continue

        entries.append(SrtEntry(int(index_line), time_range, text))

    if skipped:
        logger.debug(f"Skipped {skipped} malformed SRT blocks")
    if not entries:
        logger.warning("No valid SRT entries found in content")

    return entries


def stringify_srt(entries: Sequence[SrtEntry]) -> str:
    """Render entries back to SRT text, one blank line between blocks."""
    return "\n\n".join(e.to_srt() for e in entries)


def format_duration(milliseconds: float) -> str:
    """
    Render a duration with its largest non-zero units, e.g. ``1h 2m 5s``.

    Leading zero units are omitted; anything under a second renders ``0s``.
    """
    remaining = int(max(milliseconds, 0))
    parts: List[str] = []

    for suffix, size in _DURATION_UNITS:
        value, remaining = divmod(remaining, size)
        if value or parts:
            parts.append(f"{value}{suffix}")

    return " ".join(parts) if parts else "0s"


def compute_total_duration(entries: Sequence[SrtEntry]) -> str:
    """Human-readable length of the document, taken from the last end timestamp."""
    if not entries:
        return "0s"

    end_ms = entries[-1].end_milliseconds
    if end_ms is None:
        return DURATION_NOT_AVAILABLE

    return format_duration(end_ms)


def validate_srt_file(path: Path) -> Optional[str]:
    """
    Validate SRT file before processing.

    Args:
        path: Path to SRT file

    Returns:
        Error message if invalid, None if valid
    """
    if not path.exists():
        return f"File not found: {path}"

    if not path.is_file():
        return f"Not a file: {path}"

    suffix = path.suffix.lower()
    if suffix != '.srt':
        return f"Invalid file extension: {suffix} (expected .srt)"

    size = path.stat().st_size
    if size == 0:
        return "File is empty"
    if size > MAX_FILE_SIZE:
        return f"File too large: {size / 1024 / 1024:.1f}MB (max 50MB)"

    return None


def read_srt_file(path: Path) -> str:
    """Read an SRT file as text, dropping a UTF-8 BOM if present."""
    return path.read_text(encoding="utf-8-sig")


def save_translations(results: Sequence[TranslatedSrt], out_dir: Path) -> List[Path]:
    """
    Write each translated document to ``out_dir`` under its derived file name.

    Returns:
        Paths of the written files, in input order
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    written: List[Path] = []
    for result in results:
        path = out_dir / result.file_name
        with path.open("w", encoding="utf-8") as f:
            f.write(result.content)
        written.append(path)

    logger.info(f"Saved {len(written)} translated files to {out_dir}")
    return written
