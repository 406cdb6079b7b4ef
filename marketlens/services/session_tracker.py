"""
In-process registry of analysis pipeline runs
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from marketlens.core.logging import log
from marketlens.models.columns import utc_now
from marketlens.models.enums import Platform


class RunState(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PipelineStage(str, Enum):
    """Stages of the mock analysis pipeline, in execution order"""

    SCRAPE = "scrape"
    REVIEWS = "reviews"
    KEYWORDS = "keywords"
    RECOMMENDATIONS = "recommendations"


@dataclass
class TrackedRun:
    session_id: str
    query: str
    platforms: List[Platform]
    state: RunState = RunState.RUNNING
    stage: Optional[PipelineStage] = None
    error: Optional[str] = None
    started_at: datetime = field(default_factory=utc_now)
    finished_at: Optional[datetime] = None
    replaced: Optional["TrackedRun"] = field(default=None, repr=False)

    @property
    def cancelled(self) -> bool:
        return self.state == RunState.CANCELLED


class SessionTracker:
    """
    Tracks which sessions have a pipeline run in flight.

    Lives in process memory only: a restart forgets running sessions, after
    which their status is derived from stored rows alone. Transitions after
    ``start`` act on the run object, so a run that was cancelled and
    forgotten can never touch a newer run registered under the same id.
    """

    def __init__(self):
        self._runs: Dict[str, TrackedRun] = {}

    def start(self, session_id: str, query: str, platforms: List[Platform]) -> TrackedRun:
        run = TrackedRun(
            session_id=session_id, query=query, platforms=list(platforms), replaced=self._runs.get(session_id)
        )
        self._runs[session_id] = run
        return run

    def try_start(self, session_id: str, query: str, platforms: List[Platform]) -> Optional[TrackedRun]:
        """Register a run unless one is already running for the session"""
        if self.is_running(session_id):
            return None
        return self.start(session_id, query, platforms)

    def release(self, run: TrackedRun) -> None:
        """Drop a run that never got scheduled, restoring the one it replaced"""
        if self._runs.get(run.session_id) is not run:
            return
        if run.replaced is not None:
            self._runs[run.session_id] = run.replaced
        else:
            del self._runs[run.session_id]

    def get(self, session_id: str) -> Optional[TrackedRun]:
        return self._runs.get(session_id)

    def is_running(self, session_id: str) -> bool:
        run = self._runs.get(session_id)
        return run is not None and run.state == RunState.RUNNING

    def set_stage(self, run: TrackedRun, stage: PipelineStage) -> None:
        if run.state == RunState.RUNNING:
            run.stage = stage

    def complete(self, run: TrackedRun) -> None:
        self._finish(run, RunState.COMPLETED)

    def fail(self, run: TrackedRun, error: str) -> None:
        self._finish(run, RunState.FAILED, error=error)

    def cancel(self, session_id: str) -> bool:
        """Flag a running session so its pipeline discards its current stage and stops"""
        run = self._runs.get(session_id)
        if run is None or not self._finish(run, RunState.CANCELLED):
            return False
        log.info("Cancelled pipeline run for session {}", session_id)
        return True

    def forget(self, session_id: str) -> None:
        self._runs.pop(session_id, None)

    @staticmethod
    def _finish(run: TrackedRun, state: RunState, error: Optional[str] = None) -> bool:
        # Finished runs keep their first outcome
        if run.state != RunState.RUNNING:
            return False
        run.state = state
        run.error = error
        run.finished_at = utc_now()
        run.replaced = None
        return True

    def __len__(self) -> int:
        return len(self._runs)


session_tracker = SessionTracker()


def get_session_tracker() -> SessionTracker:
    return session_tracker
