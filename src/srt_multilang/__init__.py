"""
SRT Multilang - translate one subtitle file into many languages.

Features:
- Tolerant SRT parsing and lossless re-serialization
- Batched translation with every chunk of a language in flight at once
- One job per target language, run sequentially with pause/resume/cancel
- Overall progress and estimated time remaining
"""

__version__ = "1.0.0"

from .models import SrtEntry, TranslationJob, JobStatus, RunState, RunStatus, TranslatedSrt, RunReport
from .errors import (
    TranslatorError,
    InvalidDocument,
    MalformedTranslationOutput,
    BackendUnavailable,
    MissingCredential,
)
from .parser import parse_srt, stringify_srt, compute_total_duration, validate_srt_file, save_translations
from .languages import language_code, output_file_name, selectable_languages, TARGET_LANGUAGES
from .translator import translate_chunk, detect_language, BATCH_SEPARATOR
from .orchestrator import chunk_entries, translate_document
from .jobs import JobQueueController
from .config import TranslatorConfig
from .llm_client import create_backend, OpenAIBackend

__all__ = [
    # Models
    "SrtEntry",
    "TranslationJob",
    "JobStatus",
    "RunState",
    "RunStatus",
    "TranslatedSrt",
    "RunReport",
    "TranslatorConfig",
    # Errors
    "TranslatorError",
    "InvalidDocument",
    "MalformedTranslationOutput",
    "BackendUnavailable",
    "MissingCredential",
    # Parsing
    "parse_srt",
    "stringify_srt",
    "compute_total_duration",
    "validate_srt_file",
    "save_translations",
    # Languages
    "language_code",
    "output_file_name",
    "selectable_languages",
    "TARGET_LANGUAGES",
    # Translation
    "translate_chunk",
    "detect_language",
    "BATCH_SEPARATOR",
    "chunk_entries",
    "translate_document",
    "JobQueueController",
    # Backend
    "create_backend",
    "OpenAIBackend",
]
