"""In-memory job store with TTL cleanup.

WHY: Subtitle jobs wait on a remote transcription that can take minutes,
so the API returns a job ID immediately and does the work in the
background. Clients poll the job until its files are ready. An in-memory
store is enough for a single-process service with no persistence needs.

HOW: Three components:
  JobStatus — enum of job states
  Job       — dataclass holding job metadata, status, and temp directory
  JobStore  — lock-protected dict with create/get/list/update/delete and
              TTL-based cleanup of finished jobs

RULES:
- All store mutations hold threading.Lock
- Each job owns a temp directory for its upload and output files
- Only terminal jobs (completed, failed) expire; TTL runs from completion
- Job IDs are UUID4 hex strings
"""

from __future__ import annotations

import enum
import logging
import shutil
import tempfile
import threading
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Default time-to-live for completed/failed jobs (seconds)
DEFAULT_TTL_SECONDS = 3600


class JobStatus(str, enum.Enum):
    """Valid states for a subtitle job.

    RULES:
    - pending: job created, not yet started
    - transcribing: audio sent to the transcription API
    - generating: transcript aligned, formatters running
    - completed: all output files ready for download
    - failed: unrecoverable error at any stage
    """

    PENDING = "pending"
    TRANSCRIBING = "transcribing"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass
class Job:
    """Metadata and state for a single subtitle job.

    RULES:
    - id: UUID4 hex string, immutable after creation
    - filename: sanitized uploaded filename (also the input file's name
      inside output_dir)
    - config: layout and format choices submitted with the job
    - completed_at: set when the job reaches a terminal state
    - output_files: filenames inside output_dir available for download
    """

    id: str
    status: JobStatus
    filename: str
    output_dir: Path
    created_at: float
    updated_at: float
    completed_at: Optional[float] = None
    error: Optional[str] = None
    config: Dict[str, Any] = field(default_factory=dict)
    output_files: List[str] = field(default_factory=list)

    def touch(self, now: float) -> None:
        """Record a change at `now`; the first terminal change sets completed_at."""
        self.updated_at = now
        if self.completed_at is None and self.status.is_terminal:
            self.completed_at = now

    def expired(self, now: float, ttl_seconds: int) -> bool:
        """True when the job finished more than ttl_seconds before `now`."""
        if self.completed_at is None:
            return False
        return now - self.completed_at > ttl_seconds


class JobStore:
    """Thread-safe in-memory store for subtitle jobs.

    WHY: API handlers and background tasks touch job state from different
    threads. One store with one lock keeps them consistent.

    RULES:
    - create_job() raises ValueError when max_jobs is reached
    - get_job() returns None for unknown IDs
    - update_job() only applies arguments that are not None
    - delete_job(), cleanup_expired() and clear() remove temp directories
      after releasing the lock
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_jobs: int = 100,
    ) -> None:
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self.max_jobs = max_jobs

    def create_job(
        self,
        filename: str,
        config: Optional[Dict[str, Any]] = None,
    ) -> Job:
        """Register a PENDING job with its own temp directory."""
        with self._lock:
            if len(self._jobs) >= self.max_jobs:
                raise ValueError(
                    "Maximum number of concurrent jobs ({}) reached".format(self.max_jobs)
                )
            created = time.time()
            job = Job(
                id=uuid.uuid4().hex,
                status=JobStatus.PENDING,
                filename=filename,
                output_dir=Path(tempfile.mkdtemp(prefix="whisper_srt_job_")),
                created_at=created,
                updated_at=created,
                config=dict(config or {}),
            )
            self._jobs[job.id] = job

        logger.info("Job %s queued for %s", job.id, filename)
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def list_jobs(self) -> List[Job]:
        """Return all jobs, oldest first."""
        with self._lock:
            jobs = list(self._jobs.values())
        jobs.sort(key=lambda j: j.created_at)
        return jobs

    def update_job(
        self,
        job_id: str,
        status: Optional[JobStatus] = None,
        error: Optional[str] = None,
        output_files: Optional[List[str]] = None,
    ) -> Optional[Job]:
        """Apply the given fields to a job.

        Returns the updated Job, or None for an unknown job_id.
        """
        changes = {
            "status": status,
            "error": error,
            "output_files": output_files,
        }
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            for name, value in changes.items():
                if value is not None:
                    setattr(job, name, value)
            job.touch(time.time())
            return job

    def delete_job(self, job_id: str) -> bool:
        """Drop a job and its temp directory. False for an unknown job_id."""
        with self._lock:
            job = self._jobs.pop(job_id, None)
        if job is None:
            return False
        self._remove_dir(job.output_dir)
        logger.info("Job %s deleted", job_id)
        return True

    def cleanup_expired(self) -> int:
        """Drop finished jobs older than the TTL. Returns the number dropped."""
        now = time.time()
        with self._lock:
            stale = [
                job_id for job_id, job in self._jobs.items()
                if job.expired(now, self._ttl_seconds)
            ]
            removed = [self._jobs.pop(job_id) for job_id in stale]

        for job in removed:
            self._remove_dir(job.output_dir)
            logger.info(
                "Job %s expired %.0fs after completion", job.id, now - job.completed_at
            )
        return len(removed)

    def clear(self) -> None:
        """Drop every job. Called on shutdown."""
        with self._lock:
            removed = list(self._jobs.values())
            self._jobs.clear()
        for job in removed:
            self._remove_dir(job.output_dir)

    @staticmethod
    def _remove_dir(output_dir: Path) -> None:
        if not output_dir.exists():
            return
        try:
            shutil.rmtree(output_dir)
        except OSError:
            logger.warning("Could not remove job directory %s", output_dir)
