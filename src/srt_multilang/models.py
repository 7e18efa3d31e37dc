"""Data models for subtitle entries and translation runs."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

TIME_SEPARATOR = "-->"

_TIMESTAMP_RE = re.compile(r"(\d+):(\d{1,2}):(\d{1,2})[,.](\d{1,3})")


@dataclass(frozen=True)
class SrtEntry:
    """Represents a single subtitle cue in SRT format."""

    index: int
    time_range: str
    text: str

    @property
    def start(self) -> str:
        """Textual start timestamp (left of the separator)."""
        return self.time_range.split(TIME_SEPARATOR, 1)[0].strip()

    @property
    def end(self) -> str:
        """Textual end timestamp (right of the separator), empty if absent."""
        parts = self.time_range.split(TIME_SEPARATOR, 1)
        return parts[1].strip() if len(parts) == 2 else ""

    @property
    def end_milliseconds(self) -> Optional[int]:
        """End timestamp in milliseconds, or None if it cannot be located."""
        return timestamp_to_milliseconds(self.end)

    def to_srt(self) -> str:
        """Convert entry to its SRT block (no trailing blank line)."""
        return f"{self.index}\n{self.time_range}\n{self.text}"

    def copy(self, **changes) -> "SrtEntry":
        """Create a copy with optional field changes."""
        return replace(self, **changes)


def timestamp_to_milliseconds(value: str) -> Optional[int]:
    """Convert an ``H:MM:SS,mmm`` timestamp to milliseconds."""
    match = _TIMESTAMP_RE.search(value or "")
    if not match:
        return None
    h, m, s, ms = match.groups()
    # "5" after the comma means 500 ms, not 5 ms
    ms = ms.ljust(3, "0")
    return ((int(h) * 60 + int(m)) * 60 + int(s)) * 1000 + int(ms)


class JobStatus(str, Enum):
    """Lifecycle of one per-language translation job."""
    PENDING = "pending"
    TRANSLATING = "translating"
    COMPLETED = "completed"
    FAILED = "failed"


class RunStatus(str, Enum):
    """Status of the job queue as a whole."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(eq=False)
class TranslationJob:
    """Translation of the loaded document into one target language.

    Compared by identity: a job that was discarded by a cancel is never
    equal to a fresh job for the same language.
    """

    language: str
    total_count: int
    status: JobStatus = JobStatus.PENDING
    translated_count: int = 0
    result_content: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def is_settled(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass
class RunState:
    """State of the single active translation run."""

    status: RunStatus = RunStatus.IDLE
    jobs: List[TranslationJob] = field(default_factory=list)
    start_timestamp: Optional[float] = None

    def pending_jobs(self) -> List[TranslationJob]:
        return [j for j in self.jobs if j.status == JobStatus.PENDING]

    def active_job(self) -> Optional[TranslationJob]:
        for job in self.jobs:
            if job.status == JobStatus.TRANSLATING:
                return job
        return None


@dataclass(frozen=True)
class TranslatedSrt:
    """One finished output file."""
    language: str
    file_name: str
    content: str


@dataclass
class RunReport:
    """Outcome counts of a finished run."""

    completed: int
    failed: int
    errors: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.completed + self.failed

    def summary(self) -> str:
        if self.failed:
            return f"{self.failed} of {self.total} failed"
        return f"Finished! Translated {self.completed} file(s)."
