"""
Unit tests for QueueRunnerService.

Run: pytest tests/unit/test_queue_runner_service.py -v
"""

import asyncio

import pytest

from exceptions import MissingFieldsError, MissingTitleError, RemoteUnreachableError
from models.activity_log import LogLevel
from models.agent_settings import AgentMode, AgentSettingsUpdate
from models.product import ProductDraft
from models.queue import RunnerState
from services.queue_runner_service import QueueRunnerService
from tests.factories import DraftFactory, terminal_entries

TIMEOUT = 5


def _headlines(activity_log) -> list[str]:
    """Headlines oldest first."""
    return [entry.headline for entry in reversed(activity_log.entries())]


class TestEnqueue:
    """Tests for enqueue()"""

    @pytest.mark.asyncio
    async def test_appends_to_tail_in_order(self, runner):
        first = await runner.enqueue(DraftFactory.create(title="A"))
        second = await runner.enqueue(DraftFactory.create(title="B"))

        assert [item.id for item in runner.items] == [first.id, second.id]
        assert first.id != second.id
        assert runner.state == RunnerState.IDLE

    @pytest.mark.asyncio
    async def test_logs_queued_event(self, runner, activity_log):
        item = await runner.enqueue(DraftFactory.create(title="Copper Wire"))

        entry = activity_log.entries()[0]
        assert entry.level == LogLevel.INFO
        assert entry.headline == "Product queued: Copper Wire"
        assert entry.details == "Added to automation queue"
        assert entry.item_id == item.id

    @pytest.mark.asyncio
    async def test_empty_title_rejected(self, runner, activity_log):
        with pytest.raises(MissingTitleError):
            await runner.enqueue(ProductDraft(title="   "))

        assert runner.items == []
        entry = activity_log.entries()[0]
        assert entry.level == LogLevel.ERROR
        assert entry.headline == "Missing product name"

    @pytest.mark.asyncio
    async def test_auto_start_begins_draining(self, runner, agent_settings_service, fake_gateway):
        agent_settings_service.update(AgentSettingsUpdate(auto_start=True))

        await runner.enqueue(DraftFactory.create(title="Auto"))
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert fake_gateway.calls == ["Auto"]
        assert runner.items == []

    @pytest.mark.asyncio
    async def test_no_auto_start_leaves_queue_idle(self, runner, fake_gateway):
        await runner.enqueue(DraftFactory.create())
        await asyncio.sleep(0.01)

        assert runner.state == RunnerState.IDLE
        assert fake_gateway.calls == []


class TestStart:
    """Tests for start()"""

    @pytest.mark.asyncio
    async def test_empty_queue_logs_and_stays_idle(self, runner, activity_log):
        state = await runner.start()

        assert state == RunnerState.IDLE
        assert activity_log.entries()[0].headline == "Queue empty"

    @pytest.mark.asyncio
    async def test_n_items_produce_n_terminal_events(self, runner, activity_log, fake_gateway):
        for draft in DraftFactory.create_batch(5):
            await runner.enqueue(draft)

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert len(terminal_entries(activity_log)) == 5
        assert runner.items == []
        assert runner.state == RunnerState.IDLE
        assert runner.active_item_id is None
        assert activity_log.entries()[0].headline == "Queue complete"
        assert activity_log.entries()[0].level == LogLevel.SUCCESS

    @pytest.mark.asyncio
    async def test_start_while_running_is_noop(self, runner, fake_gateway):
        fake_gateway.hold("Slow")
        await runner.enqueue(DraftFactory.create(title="Slow"))
        await runner.start()
        await asyncio.wait_for(fake_gateway.started_event("Slow").wait(), TIMEOUT)

        state = await runner.start()
        fake_gateway.release("Slow")
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert state == RunnerState.RUNNING
        assert fake_gateway.calls == ["Slow"]


class TestDrain:
    """Dispatch order, failure handling and single in-flight upload."""

    @pytest.mark.asyncio
    async def test_dispatches_in_enqueue_order(self, runner, fake_gateway):
        for title in ["A", "B", "C"]:
            await runner.enqueue(DraftFactory.create(title=title))

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert fake_gateway.calls == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_items_enqueued_during_dispatch_go_last(self, runner, fake_gateway):
        enqueued_during = []

        async def enqueue_more(product):
            if product.title == "A":
                for title in ["D", "E"]:
                    item = await runner.enqueue(DraftFactory.create(title=title))
                    enqueued_during.append(item.id)

        fake_gateway.on_submit = enqueue_more
        for title in ["A", "B", "C"]:
            await runner.enqueue(DraftFactory.create(title=title))

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert fake_gateway.calls == ["A", "B", "C", "D", "E"]
        assert len(enqueued_during) == 2

    @pytest.mark.asyncio
    async def test_at_most_one_upload_in_flight(self, runner, fake_gateway):
        for draft in DraftFactory.create_batch(6):
            await runner.enqueue(draft)

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert fake_gateway.max_in_flight == 1
        assert len(fake_gateway.calls) == 6

    @pytest.mark.asyncio
    async def test_active_item_marks_dispatched_item(self, runner, fake_gateway):
        items = [await runner.enqueue(DraftFactory.create()) for _ in range(3)]

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert fake_gateway.active_ids_seen == [item.id for item in items]

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_queue(self, runner, activity_log, fake_gateway):
        fake_gateway.fail("Broken", MissingFieldsError(["description"]))
        fake_gateway.fail("Offline", RemoteUnreachableError("Connection reset"))
        for title in ["Broken", "Good", "Offline", "Last"]:
            await runner.enqueue(DraftFactory.create(title=title))

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        outcomes = [(entry.headline, entry.level) for entry in terminal_entries(activity_log)]
        assert outcomes == [
            ("Failed: Broken", LogLevel.ERROR),
            ("Uploaded: Good", LogLevel.SUCCESS),
            ("Failed: Offline", LogLevel.ERROR),
            ("Uploaded: Last", LogLevel.SUCCESS),
        ]
        failed = terminal_entries(activity_log)[0]
        assert failed.details == "Missing required product fields: description"
        assert runner.items == []

    @pytest.mark.asyncio
    async def test_unexpected_exception_logged_and_queue_continues(self, runner, activity_log, fake_gateway):
        fake_gateway.fail("Boom", RuntimeError("socket exploded"))
        for title in ["Boom", "After"]:
            await runner.enqueue(DraftFactory.create(title=title))

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        entries = terminal_entries(activity_log)
        assert entries[0].headline == "Failed: Boom"
        assert entries[0].details == "socket exploded"
        assert entries[1].headline == "Uploaded: After"

    @pytest.mark.asyncio
    async def test_failed_item_not_retried(self, runner, fake_gateway):
        fake_gateway.fail("Broken", MissingFieldsError(["title"]))
        await runner.enqueue(DraftFactory.create(title="Broken"))

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)
        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert fake_gateway.calls == ["Broken"]

    @pytest.mark.asyncio
    async def test_processing_and_uploaded_events(self, runner, activity_log):
        item = await runner.enqueue(DraftFactory.create(title="Wire"))

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        item_events = [entry for entry in reversed(activity_log.entries()) if entry.item_id == item.id]
        assert [entry.headline for entry in item_events] == [
            "Product queued: Wire",
            "Processing: Wire",
            "Uploaded: Wire",
        ]
        assert item_events[1].details == "Attempting IndiaMART sync in simulation mode."
        assert item_events[2].details == "Simulation completed. Ready to upload live."

    @pytest.mark.asyncio
    async def test_inter_item_delay(self, fake_gateway, activity_log, agent_settings_service):
        runner = QueueRunnerService(
            gateway=fake_gateway,
            activity_log=activity_log,
            settings_provider=agent_settings_service.snapshot,
            inter_item_delay=0.05,
        )
        try:
            for draft in DraftFactory.create_batch(3):
                await runner.enqueue(draft)

            loop = asyncio.get_running_loop()
            started = loop.time()
            await runner.start()
            await runner.wait_until_idle(timeout=TIMEOUT)

            assert loop.time() - started >= 0.1
            assert len(fake_gateway.calls) == 3
        finally:
            await runner.shutdown()


class TestSettingsSnapshot:
    """Settings are read per dispatch."""

    @pytest.mark.asyncio
    async def test_mode_change_applies_to_next_item(self, runner, agent_settings_service, fake_gateway):
        fake_gateway.hold("First")
        await runner.enqueue(DraftFactory.create(title="First"))
        await runner.enqueue(DraftFactory.create(title="Second"))

        await runner.start()
        await asyncio.wait_for(fake_gateway.started_event("First").wait(), TIMEOUT)
        agent_settings_service.update(AgentSettingsUpdate(mode=AgentMode.LIVE))
        fake_gateway.release("First")
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert [s.mode for s in fake_gateway.settings_seen] == [AgentMode.SIMULATE, AgentMode.LIVE]


class TestStop:
    """Tests for stop()"""

    @pytest.mark.asyncio
    async def test_stop_mid_drain_keeps_in_flight_result(self, runner, activity_log, fake_gateway):
        fake_gateway.hold("A")
        await runner.enqueue(DraftFactory.create(title="A"))
        second = await runner.enqueue(DraftFactory.create(title="B"))

        await runner.start()
        await asyncio.wait_for(fake_gateway.started_event("A").wait(), TIMEOUT)

        state = await runner.stop()
        assert state == RunnerState.IDLE
        assert runner.active_item_id is None

        fake_gateway.release("A")
        await runner.wait_until_idle(timeout=TIMEOUT)

        # A finished and was logged after the pause, B never started
        assert fake_gateway.calls == ["A"]
        assert [item.id for item in runner.items] == [second.id]
        headlines = _headlines(activity_log)
        assert headlines.index("Agent paused") < headlines.index("Uploaded: A")
        assert "Queue complete" not in headlines

        await runner.start()
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert fake_gateway.calls == ["A", "B"]
        assert runner.items == []

    @pytest.mark.asyncio
    async def test_restart_before_in_flight_finishes_does_not_double_dispatch(self, runner, fake_gateway):
        fake_gateway.hold("A")
        await runner.enqueue(DraftFactory.create(title="A"))
        await runner.enqueue(DraftFactory.create(title="B"))

        await runner.start()
        await asyncio.wait_for(fake_gateway.started_event("A").wait(), TIMEOUT)
        await runner.stop()
        await runner.start()

        fake_gateway.release("A")
        await runner.wait_until_idle(timeout=TIMEOUT)

        assert fake_gateway.calls == ["A", "B"]
        assert fake_gateway.max_in_flight == 1

    @pytest.mark.asyncio
    async def test_stop_when_idle_logs_pause(self, runner, activity_log):
        state = await runner.stop()

        assert state == RunnerState.IDLE
        assert activity_log.entries()[0].headline == "Agent paused"


class TestStatus:
    """Tests for status()"""

    @pytest.mark.asyncio
    async def test_status_snapshot(self, runner):
        item = await runner.enqueue(DraftFactory.create(title="Wire"))

        status = runner.status()

        assert status.state == RunnerState.IDLE
        assert status.pending == 1
        assert status.items[0].id == item.id
        assert status.to_wire()["activeItemId"] is None
