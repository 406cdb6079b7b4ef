"""
Test the in-process pipeline run registry
"""

from marketlens.models.enums import Platform
from marketlens.services.session_tracker import PipelineStage, RunState, SessionTracker


def test_start_registers_running_session():
    tracker = SessionTracker()

    run = tracker.start("s1", "earbuds", [Platform.SHOPEE, Platform.TOKOPEDIA])

    assert tracker.is_running("s1")
    assert tracker.get("s1") is run
    assert run.state == RunState.RUNNING
    assert run.platforms == [Platform.SHOPEE, Platform.TOKOPEDIA]
    assert len(tracker) == 1


def test_unknown_session_is_not_running():
    tracker = SessionTracker()

    assert tracker.get("missing") is None
    assert not tracker.is_running("missing")
    assert tracker.cancel("missing") is False


def test_stage_and_completion_are_recorded():
    tracker = SessionTracker()
    run = tracker.start("s1", "earbuds", [Platform.SHOPEE])

    tracker.set_stage(run, PipelineStage.KEYWORDS)
    tracker.complete(run)

    assert run.stage == PipelineStage.KEYWORDS
    assert run.state == RunState.COMPLETED
    assert run.finished_at is not None
    assert not tracker.is_running("s1")


def test_fail_records_error():
    tracker = SessionTracker()
    run = tracker.start("s1", "earbuds", [Platform.SHOPEE])

    tracker.fail(run, "boom")

    assert run.state == RunState.FAILED
    assert run.error == "boom"


def test_cancel_only_affects_running_sessions():
    tracker = SessionTracker()
    run = tracker.start("s1", "earbuds", [Platform.SHOPEE])

    assert tracker.cancel("s1") is True
    assert run.cancelled
    assert tracker.cancel("s1") is False


def test_forget_keeps_cancel_flag_on_detached_run():
    tracker = SessionTracker()
    run = tracker.start("s1", "earbuds", [Platform.SHOPEE])
    tracker.cancel("s1")

    tracker.forget("s1")

    assert tracker.get("s1") is None
    assert run.cancelled
    assert len(tracker) == 0


def test_restart_replaces_previous_run():
    tracker = SessionTracker()
    first = tracker.start("s1", "earbuds", [Platform.SHOPEE])
    tracker.cancel("s1")

    second = tracker.start("s1", "earbuds", [Platform.SHOPEE])

    assert tracker.get("s1") is second
    assert first.cancelled
    assert not second.cancelled


def test_try_start_refuses_running_session():
    tracker = SessionTracker()
    first = tracker.try_start("s1", "earbuds", [Platform.SHOPEE])

    assert first is not None
    assert tracker.try_start("s1", "earbuds", [Platform.SHOPEE]) is None
    assert tracker.get("s1") is first


def test_release_restores_replaced_run():
    tracker = SessionTracker()
    finished = tracker.start("s1", "earbuds", [Platform.SHOPEE])
    tracker.fail(finished, "boom")

    claim = tracker.try_start("s1", "earbuds", [Platform.SHOPEE])
    tracker.release(claim)

    assert tracker.get("s1") is finished
    assert finished.state == RunState.FAILED


def test_release_of_fresh_claim_drops_it():
    tracker = SessionTracker()
    claim = tracker.try_start("s1", "earbuds", [Platform.SHOPEE])

    tracker.release(claim)

    assert tracker.get("s1") is None
    assert len(tracker) == 0


def test_detached_run_cannot_finish_newer_run():
    tracker = SessionTracker()
    stale = tracker.start("s1", "earbuds", [Platform.SHOPEE])
    tracker.cancel("s1")
    tracker.forget("s1")
    current = tracker.start("s1", "earbuds", [Platform.SHOPEE])

    tracker.set_stage(stale, PipelineStage.REVIEWS)
    tracker.fail(stale, "boom")
    tracker.complete(stale)

    assert current.state == RunState.RUNNING
    assert current.stage is None
    assert current.error is None
    assert stale.state == RunState.CANCELLED
    assert stale.error is None


def test_started_at_is_timezone_aware():
    run = SessionTracker().start("s1", "earbuds", [Platform.SHOPEE])

    assert run.started_at.tzinfo is not None
