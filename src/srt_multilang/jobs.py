"""Sequential per-language job queue with pause, resume and cancel."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional, Sequence, Set

from .config import TranslatorConfig
from .errors import InvalidDocument, MissingCredential, TranslatorError
from .languages import output_file_name
from .llm_client import TranslationBackend
from .models import (
    JobStatus,
    RunReport,
    RunState,
    RunStatus,
    SrtEntry,
    TranslatedSrt,
    TranslationJob,
)
from .orchestrator import translate_document
from .parser import parse_srt, stringify_srt

logger = logging.getLogger(__name__)


class JobQueueController:
    """
    Runs one translation job per target language, one job at a time.

    The queue is a small state machine: ``start`` creates the jobs and
    picks the first one, and every job settlement advances to the next
    pending job unless the run is paused. Chunks inside a job still run
    concurrently.

    Nothing in flight is ever aborted. ``cancel`` bumps a generation
    counter instead, and progress or settlement events from an older
    generation (or for a job no longer in the run) are dropped.
    """

    def __init__(
        self,
        backend: Optional[TranslationBackend],
        config: Optional[TranslatorConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.backend = backend
        self.config = config or TranslatorConfig()
        self._clock = clock

        self.state = RunState()
        self.entries: List[SrtEntry] = []
        self.file_name = ""
        self.results: List[TranslatedSrt] = []
        self.errors: List[str] = []
        self.report: Optional[RunReport] = None

        self._generation = 0
        self._finished_at: Optional[float] = None
        self._tasks: Set[asyncio.Task] = set()
        self._settled = asyncio.Event()
        self._settled.set()

    @property
    def status(self) -> RunStatus:
        return self.state.status

    @property
    def jobs(self) -> List[TranslationJob]:
        return self.state.jobs

    # -- commands ---------------------------------------------------------

    def load(self, content: str, file_name: str) -> List[SrtEntry]:
        """
        Parse a new source document and reset any run in progress.

        Raises:
            InvalidDocument: no subtitle entry could be parsed
        """
        self._reset()
        self.entries = parse_srt(content)
        self.file_name = file_name

        if not self.entries:
            raise InvalidDocument()

        logger.info(f"Loaded {file_name}: {len(self.entries)} subtitle entries")
        return self.entries

    def start(self, languages: Sequence[str]) -> None:
        """Create one pending job per language and begin the first one."""
        if self.state.status != RunStatus.IDLE:
            raise RuntimeError("A translation run is already active")
        if not self.entries:
            raise InvalidDocument("Please load an SRT file first.")
        if not languages:
            raise ValueError("Please select at least one target language.")
        if len(set(languages)) != len(languages):
            raise ValueError("Target languages must be unique")
        if self.backend is None:
            raise MissingCredential()

        self._generation += 1
        total = len(self.entries)
        self.state = RunState(
            status=RunStatus.RUNNING,
            jobs=[TranslationJob(language=lang, total_count=total) for lang in languages],
            start_timestamp=self._clock(),
        )
        self.results = []
        self.errors = []
        self.report = None
        self._finished_at = None
        self._settled = asyncio.Event()

        logger.info(f"Starting run: {len(languages)} languages, {total} entries each")
        self._advance()

    def pause(self) -> None:
        """Stop advancing to the next job; the current job keeps running."""
        if self.state.status == RunStatus.RUNNING:
            self.state.status = RunStatus.PAUSED
            done = sum(1 for j in self.state.jobs if j.is_settled)
            logger.info(f"Paused. Translated {done}/{len(self.state.jobs)}.")

    def resume(self) -> None:
        if self.state.status == RunStatus.PAUSED:
            self.state.status = RunStatus.RUNNING
            logger.info("Resumed")
            self._advance()

    def cancel(self) -> None:
        """Drop the run and all its jobs. Late results are ignored."""
        if self.state.status != RunStatus.IDLE or self.state.jobs:
            logger.info("Run cancelled")
        self._reset()

    async def wait(self) -> Optional[RunReport]:
        """Wait until the run completes or is cancelled.

        Returns:
            The completion report, or None if the run was cancelled
        """
        await self._settled.wait()
        return self.report

    # -- progress ---------------------------------------------------------

    @property
    def total_subtitles(self) -> int:
        jobs = self.state.jobs
        # every job covers the same document
        return jobs[0].total_count * len(jobs) if jobs else 0

    @property
    def translated_subtitles(self) -> int:
        return sum(j.translated_count for j in self.state.jobs)

    def progress_percentage(self) -> int:
        total = self.total_subtitles
        if total == 0:
            return 0
        return round(self.translated_subtitles / total * 100)

    def elapsed(self) -> Optional[float]:
        """Seconds since the run started, frozen once it completes."""
        if self.state.start_timestamp is None:
            return None
        end = self._finished_at if self._finished_at is not None else self._clock()
        return end - self.state.start_timestamp

    def estimated_remaining(self) -> Optional[float]:
        """
        Seconds left at the average throughput observed so far.

        None while not running or before any subtitle has been translated.
        """
        if self.state.status != RunStatus.RUNNING:
            return None

        translated = self.translated_subtitles
        elapsed = self.elapsed()
        if not translated or not elapsed or elapsed <= 0:
            return None

        rate = translated / elapsed
        return (self.total_subtitles - translated) / rate

    # -- scheduling -------------------------------------------------------

    def _reset(self) -> None:
        self._generation += 1
        self.state = RunState()
        self.results = []
        self.errors = []
        self.report = None
        self._finished_at = None
        self._settled.set()

    def _is_current(self, job: TranslationJob, generation: int) -> bool:
        return generation == self._generation and any(j is job for j in self.state.jobs)

    def _advance(self) -> None:
        if self.state.status != RunStatus.RUNNING:
            return
        if self.state.active_job() is not None:
            return

        pending = self.state.pending_jobs()
        if not pending:
            self._finish()
            return

        job = pending[0]
        job.status = JobStatus.TRANSLATING
        position = self.state.jobs.index(job) + 1
        logger.info(f"Translating to {job.language} ({position}/{len(self.state.jobs)})...")

        task = asyncio.get_running_loop().create_task(self._process(job, self._generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _process(self, job: TranslationJob, generation: int) -> None:
        def on_progress(count: int) -> None:
            if self._is_current(job, generation):
                job.translated_count += count

        entries = list(self.entries)
        try:
            texts = await translate_document(
                self.backend,
                entries,
                job.language,
                self.config.batch_size,
                on_progress=on_progress,
                model=self.config.model_name,
                max_concurrency=self.config.max_concurrency,
            )
        except asyncio.CancelledError:
            self._abort(job, generation)
            raise
        except TranslatorError as e:
            self._on_settlement(job, generation, error=e.message)
            return
        except Exception as e:
            if self._is_current(job, generation):
                logger.exception(f"Unexpected error while translating to {job.language}")
            self._on_settlement(job, generation, error=str(e) or e.__class__.__name__)
            return

        translated = [
            entry.copy(text=text or entry.text)
            for entry, text in zip(entries, texts)
        ]
        self._on_settlement(job, generation, content=stringify_srt(translated))

    def _on_settlement(
        self,
        job: TranslationJob,
        generation: int,
        content: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        if not self._is_current(job, generation):
            logger.debug(f"Ignoring stale result for {job.language}")
            return

        if error is None:
            job.status = JobStatus.COMPLETED
            job.result_content = content
            self.results.append(TranslatedSrt(
                language=job.language,
                file_name=output_file_name(self.file_name, job.language),
                content=content,
            ))
            logger.info(f"Completed {job.language}")
        else:
            job.status = JobStatus.FAILED
            job.error_message = error
            self.errors.append(f"- {job.language}: {error}")
            logger.warning(f"Failed {job.language}: {error}")

        if not self.state.pending_jobs():
            self._finish()
        else:
            self._advance()

    def _abort(self, job: TranslationJob, generation: int) -> None:
        """The job's task was cancelled: fail it and end the run without starting another task."""
        if not self._is_current(job, generation):
            return

        job.status = JobStatus.FAILED
        job.error_message = "Translation task was cancelled"
        self.errors.append(f"- {job.language}: {job.error_message}")
        logger.warning(f"Task for {job.language} cancelled, stopping run")
        self._finish()

    def _finish(self) -> None:
        completed = sum(1 for j in self.state.jobs if j.status == JobStatus.COMPLETED)
        failed = sum(1 for j in self.state.jobs if j.status == JobStatus.FAILED)

        self.report = RunReport(completed=completed, failed=failed, errors=list(self.errors))
        self.state.status = RunStatus.IDLE
        self._finished_at = self._clock()

        if failed:
            logger.warning(f"Some translations failed ({self.report.summary()}):\n" + "\n".join(self.errors))
        else:
            logger.info(self.report.summary())
        self._settled.set()
