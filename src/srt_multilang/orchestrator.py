"""Concurrent batch translation of a whole subtitle document."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Callable, List, Optional, Sequence

from .llm_client import TranslationBackend
from .models import SrtEntry
from .translator import translate_chunk

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


def chunk_entries(entries: Sequence[SrtEntry], batch_size: int) -> List[List[SrtEntry]]:
    """
    Partition entries into consecutive chunks of at most ``batch_size``.

    Only the last chunk may be shorter. Concatenating the chunks gives
    back ``entries`` in their original order.
    """
    if batch_size < 1:
        raise ValueError(f"Batch size must be at least 1, got {batch_size}")

    return [
        list(entries[i:i + batch_size])
        for i in range(0, len(entries), batch_size)
    ]


async def translate_document(
    backend: TranslationBackend,
    entries: Sequence[SrtEntry],
    target_language: str,
    batch_size: int,
    on_progress: Optional[ProgressCallback] = None,
    model: str = "deepseek-chat",
    max_concurrency: Optional[int] = None,
) -> List[str]:
    """
    Translate every entry of a document, all chunks in flight at once.

    ``on_progress`` is called once per successful chunk with that chunk's
    entry count, in whatever order the chunks finish. The returned texts
    are always in document order.

    Raises:
        The error of the first failed chunk (in document order). Results of
        chunks that did succeed are discarded.
    """
    chunks = chunk_entries(entries, batch_size)
    if not chunks:
        return []

    sem = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def run_chunk(chunk_idx: int, chunk: List[SrtEntry]) -> List[str]:
        async with sem if sem else contextlib.nullcontext():
            logger.debug(
                f"Dispatching chunk {chunk_idx + 1}/{len(chunks)} "
                f"({len(chunk)} entries) to {target_language}"
            )
            translated = await translate_chunk(backend, chunk, target_language, model)
        if on_progress:
            on_progress(len(chunk))
        return translated

    logger.info(f"Translating {len(entries)} entries to {target_language} in {len(chunks)} chunks")

    results = await asyncio.gather(
        *(run_chunk(i, chunk) for i, chunk in enumerate(chunks)),
        return_exceptions=True,
    )

    for chunk_idx, result in enumerate(results):
        if isinstance(result, BaseException):
            logger.error(f"Chunk {chunk_idx + 1}/{len(chunks)} for {target_language} failed: {result}")
            raise result

    # gather keeps submission order, so this is document order
    return [text for chunk_texts in results for text in chunk_texts]
