"""
Queue runner service.

Drains queued product drafts through the IndiaMART gateway, one at a time.

The runner is a small actor: every state change happens while handling one
message from its mailbox (Enqueue, Start, Stop, DispatchComplete, DrainTick),
so the queue and the active item marker have a single writer. The upload
itself runs as a separate task and reports back with DispatchComplete, which
keeps Stop and Enqueue responsive while a call is in flight. The pause
between two uploads is a timer that posts a DrainTick.

States:
    IDLE     nothing will be dispatched
    RUNNING  the head of the queue is dispatched whenever nothing is in flight

A failed upload is logged and the runner moves on. Nothing is retried.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol
import uuid

import structlog

from config import settings
from exceptions import AppError, MissingTitleError
from models.agent_settings import AgentSettings
from models.catalog import SubmitResult, SubmitStatus
from models.product import NormalizedProduct, ProductDraft
from models.queue import QueuedItem, QueueStatusResponse, RunnerState
from services.activity_log_service import ActivityLogService, get_activity_log_service
from services.agent_settings_service import get_agent_settings_service
from services.draft_service import normalize_draft
from utils.text_utils import display_title

logger = structlog.get_logger(__name__)


class UploadGateway(Protocol):
    """Anything that can upload one normalized product."""

    async def submit(self, product: NormalizedProduct, agent_settings: AgentSettings) -> SubmitResult:
        ...


# ===================
# MESSAGES
# ===================

@dataclass
class Enqueue:
    draft: ProductDraft
    reply: Optional[asyncio.Future] = None


@dataclass
class Start:
    reply: Optional[asyncio.Future] = None


@dataclass
class Stop:
    reply: Optional[asyncio.Future] = None


@dataclass
class DrainTick:
    reply: Optional[asyncio.Future] = None


@dataclass
class DispatchComplete:
    item: QueuedItem
    agent_settings: AgentSettings
    result: Optional[SubmitResult] = None
    error: Optional[Exception] = None
    reply: Optional[asyncio.Future] = None


@dataclass
class Shutdown:
    reply: Optional[asyncio.Future] = None


# ===================
# RUNNER
# ===================

class QueueRunnerService:
    """
    Sequential upload queue.

    Args:
        gateway: Upload gateway (IndiaMartGateway in production)
        activity_log: Sink for console events
        settings_provider: Returns the current AgentSettings snapshot; called
                           once per enqueue/dispatch
        inter_item_delay: Seconds between the end of one upload and the next
    """

    def __init__(
        self,
        gateway: UploadGateway,
        activity_log: ActivityLogService,
        settings_provider: Callable[[], AgentSettings],
        inter_item_delay: float = 0.6,
    ):
        if inter_item_delay < 0:
            raise ValueError("inter_item_delay must be >= 0")

        self.gateway = gateway
        self.activity_log = activity_log
        self.settings_provider = settings_provider
        self.inter_item_delay = inter_item_delay

        self._items: list[QueuedItem] = []
        self._state = RunnerState.IDLE
        self._active_item_id: Optional[str] = None

        # Item whose upload has not reported back yet. Unlike the active
        # marker, stop() does not clear it.
        self._in_flight: Optional[QueuedItem] = None
        self._dispatch_task: Optional[asyncio.Task] = None
        self._timer: Optional[asyncio.TimerHandle] = None

        self._mailbox: asyncio.Queue = asyncio.Queue()
        self._idle = asyncio.Event()
        self._idle.set()
        self._actor: Optional[asyncio.Task] = None

    # ===================
    # READ SIDE
    # ===================

    @property
    def state(self) -> RunnerState:
        return self._state

    @property
    def active_item_id(self) -> Optional[str]:
        return self._active_item_id

    @property
    def items(self) -> list[QueuedItem]:
        """Pending items in dispatch order (copy)."""
        return list(self._items)

    def status(self) -> QueueStatusResponse:
        return QueueStatusResponse(
            state=self._state,
            active_item_id=self._active_item_id,
            pending=len(self._items),
            items=self.items,
        )

    # ===================
    # PUBLIC ENTRY POINTS
    # ===================

    def start_actor(self) -> None:
        """Start processing the mailbox on the running event loop."""
        if self._actor is None or self._actor.done():
            self._actor = asyncio.get_running_loop().create_task(self._run())
            logger.info("queue_runner_started", inter_item_delay=self.inter_item_delay)

    async def enqueue(self, draft: ProductDraft) -> QueuedItem:
        """
        Add a draft to the tail of the queue.

        Raises:
            MissingTitleError: Draft has no title (nothing is queued)
        """
        return await self._call(Enqueue(draft=draft))

    async def start(self) -> RunnerState:
        """Begin draining. No-op when already running."""
        return await self._call(Start())

    async def stop(self) -> RunnerState:
        """
        Pause after the current upload.

        The in-flight call is not cancelled; its outcome is still logged.
        """
        return await self._call(Stop())

    async def wait_until_idle(self, timeout: Optional[float] = None) -> None:
        """Wait until the runner is IDLE with no upload in flight."""
        await asyncio.wait_for(self._idle.wait(), timeout=timeout)

    async def shutdown(self) -> None:
        """Stop the actor. Pending uploads are abandoned."""
        if self._actor is None or self._actor.done():
            return

        await self._call(Shutdown())
        await self._actor
        self._actor = None

        if self._dispatch_task is not None and not self._dispatch_task.done():
            self._dispatch_task.cancel()
            try:
                await self._dispatch_task
            except asyncio.CancelledError:
                pass

        logger.info("queue_runner_stopped", pending=len(self._items))

    # ===================
    # ACTOR LOOP
    # ===================

    async def _call(self, message: Any) -> Any:
        self.start_actor()
        message.reply = asyncio.get_running_loop().create_future()
        self._mailbox.put_nowait(message)
        return await message.reply

    def _post(self, message: Any) -> None:
        self._mailbox.put_nowait(message)

    async def _run(self) -> None:
        handlers = {
            Enqueue: self._on_enqueue,
            Start: self._on_start,
            Stop: self._on_stop,
            DrainTick: self._on_drain_tick,
            DispatchComplete: self._on_dispatch_complete,
        }

        while True:
            message = await self._mailbox.get()

            if isinstance(message, Shutdown):
                self._cancel_timer()
                if message.reply is not None and not message.reply.done():
                    message.reply.set_result(None)
                return

            try:
                result = handlers[type(message)](message)
            except AppError as e:
                self._reply_error(message, e)
            except Exception as e:
                logger.exception("queue_message_failed", message=type(message).__name__)
                self._reply_error(message, e)
            else:
                if message.reply is not None and not message.reply.done():
                    message.reply.set_result(result)
            finally:
                self._refresh_idle()

    @staticmethod
    def _reply_error(message: Any, error: Exception) -> None:
        if message.reply is not None and not message.reply.done():
            message.reply.set_exception(error)

    def _refresh_idle(self) -> None:
        if self._state == RunnerState.IDLE and self._in_flight is None:
            self._idle.set()
        else:
            self._idle.clear()

    # ===================
    # HANDLERS
    # ===================

    def _on_enqueue(self, message: Enqueue) -> QueuedItem:
        draft = message.draft

        if not draft.title.strip():
            self.activity_log.error(
                "Missing product name",
                "Add a product title before queuing.",
            )
            raise MissingTitleError()

        item = QueuedItem(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            payload=draft,
        )
        self._items.append(item)

        self.activity_log.info(
            f"Product queued: {display_title(draft.title, 'Untitled')}",
            "Added to automation queue",
            item_id=item.id,
        )
        logger.debug("product_queued", item_id=item.id, pending=len(self._items))

        if self.settings_provider().auto_start and self._state == RunnerState.IDLE:
            self._run_queue()

        return item

    def _on_start(self, message: Start) -> RunnerState:
        if self._state == RunnerState.RUNNING:
            return self._state

        if not self._items:
            self.activity_log.info("Queue empty", "No products waiting in the queue.")
            return self._state

        self._run_queue()
        return self._state

    def _on_stop(self, message: Stop) -> RunnerState:
        self._state = RunnerState.IDLE
        self._active_item_id = None
        self._cancel_timer()

        self.activity_log.info("Agent paused", "Automation paused manually.")
        logger.info(
            "queue_paused",
            pending=len(self._items),
            in_flight=self._in_flight.id if self._in_flight else None,
        )
        return self._state

    def _on_drain_tick(self, message: DrainTick) -> None:
        self._timer = None

        if self._state != RunnerState.RUNNING or self._in_flight is not None:
            return

        if not self._items:
            self._state = RunnerState.IDLE
            self.activity_log.success("Queue complete", "All products processed successfully.")
            return

        item = self._items[0]
        agent_settings = self.settings_provider()

        self._active_item_id = item.id
        self._in_flight = item

        mode_label = "live" if agent_settings.is_live else "simulation"
        self.activity_log.info(
            f"Processing: {display_title(item.payload.title)}",
            f"Attempting IndiaMART sync in {mode_label} mode.",
            item_id=item.id,
        )

        self._dispatch_task = asyncio.get_running_loop().create_task(
            self._dispatch(item, agent_settings)
        )

    def _on_dispatch_complete(self, message: DispatchComplete) -> None:
        item = message.item
        title = display_title(item.payload.title)

        if message.error is None:
            if message.result.status == SubmitStatus.SIMULATED:
                details = "Simulation completed. Ready to upload live."
            else:
                details = f"IndiaMART responded with status: {message.result.status.value}"
            self.activity_log.success(f"Uploaded: {title}", details, item_id=item.id)
        else:
            self.activity_log.error(f"Failed: {title}", _error_message(message.error), item_id=item.id)

        # By id: the queue may have grown while the upload was in flight
        self._items = [queued for queued in self._items if queued.id != item.id]

        if self._active_item_id == item.id:
            self._active_item_id = None
        self._in_flight = None
        self._dispatch_task = None

        if self._state == RunnerState.RUNNING:
            self._schedule_tick()

    # ===================
    # DISPATCH
    # ===================

    async def _dispatch(self, item: QueuedItem, agent_settings: AgentSettings) -> None:
        """Upload one item and report back to the mailbox."""
        outcome = DispatchComplete(item=item, agent_settings=agent_settings)
        try:
            product = normalize_draft(item.payload)
            outcome.result = await self.gateway.submit(product, agent_settings)
        except AppError as e:
            logger.warning("upload_failed", item_id=item.id, code=e.code, error=e.message)
            outcome.error = e
        except Exception as e:
            logger.exception("upload_unexpected_error", item_id=item.id)
            outcome.error = e
        else:
            logger.info("upload_completed", item_id=item.id, status=outcome.result.status.value)

        self._post(outcome)

    def _run_queue(self) -> None:
        self._state = RunnerState.RUNNING
        self._post(DrainTick())

    def _schedule_tick(self) -> None:
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().call_later(
            self.inter_item_delay, self._post, DrainTick()
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


def _error_message(error: Exception) -> str:
    if isinstance(error, AppError):
        return error.message
    return str(error) or "Unexpected error while uploading product."


# Singleton instance for convenience
_queue_runner_service: Optional[QueueRunnerService] = None


def get_queue_runner_service() -> QueueRunnerService:
    """Get or create QueueRunnerService instance."""
    global _queue_runner_service
    if _queue_runner_service is None:
        from integrations.indiamart import get_indiamart_gateway

        _queue_runner_service = QueueRunnerService(
            gateway=get_indiamart_gateway(),
            activity_log=get_activity_log_service(),
            settings_provider=get_agent_settings_service().snapshot,
            inter_item_delay=settings.queue_inter_item_delay_seconds,
        )
    return _queue_runner_service
