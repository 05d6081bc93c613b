"""
Incremental UI Updater

This module keeps the launcher UI state fresh as new prediction batches
arrive. A single consumer task owns the current state and serializes every
incoming batch; rapid-fire batches are debounced through a cancellable
scheduled job so that only the latest one is applied.
"""

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Set, Union

from .config import settings
from .launcher_models import App, PredictionBatch, UIState
from .ui_state_generator import generate_ui_state, generate_ui_update, has_significant_routine_change

logger = logging.getLogger(__name__)


class UpdateDecision(Enum):
    """How the updater handled a batch"""
    INITIAL = "initial"                # first state of the session
    ROUTINE_CHANGE = "routine_change"  # immediate, full regeneration
    IMMEDIATE = "immediate"            # stale state, full regeneration
    DEBOUNCED = "debounced"            # applied after the debounce window
    SUPERSEDED = "superseded"          # dropped in favour of a newer batch


@dataclass(frozen=True)
class StateCell:
    """The current snapshot together with its version and update stamp"""
    state: UIState
    version: int
    updated_at_ms: float


@dataclass
class UpdaterStats:
    """Counters describing updater activity"""
    batches_received: int = 0
    initial_generations: int = 0
    immediate_updates: int = 0
    debounced_updates: int = 0
    superseded_batches: int = 0
    generation_failures: int = 0
    fallback_generations: int = 0
    emissions: int = 0
    listener_errors: int = 0


@dataclass(frozen=True)
class _BatchArrived:
    batch: PredictionBatch


@dataclass(frozen=True)
class _DebounceElapsed:
    token: int


StateListener = Callable[[UIState], object]
_Event = Union[_BatchArrived, _DebounceElapsed]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class IncrementalUpdater:
    """
    Owns the launcher UI state for one session and patches it per batch.

    Batches are accepted immediately by ``submit`` and processed in order by
    a single update task. A batch arriving more than ``force_refresh_ms``
    after the last update, or carrying a routine change, is applied at once;
    otherwise it waits ``debounce_ms`` and is dropped if a newer batch
    arrives first. Accepted states are delivered whole to every listener.
    """

    def __init__(
        self,
        catalog: Sequence[App] = (),
        debounce_ms: Optional[int] = None,
        force_refresh_ms: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
        full_generator: Callable = generate_ui_state,
        selective_updater: Callable = generate_ui_update
    ):
        self.debounce_ms = settings.DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self.force_refresh_ms = (
            settings.FORCE_REFRESH_MS if force_refresh_ms is None else force_refresh_ms
        )
        self._clock = clock or _monotonic_ms
        self._full_generator = full_generator
        self._selective_updater = selective_updater
        self._catalog = tuple(catalog)

        # State owned by the update task
        self._cell: Optional[StateCell] = None
        self._pending_batch: Optional[PredictionBatch] = None
        self._pending_token = 0
        self._debounce_task: Optional[asyncio.Task] = None

        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._background_tasks: Set[asyncio.Task] = set()
        self._running = False

        self._listeners: List[StateListener] = []
        self.stats = UpdaterStats()

        logger.info(
            f"Incremental updater initialized (debounce={self.debounce_ms}ms, "
            f"force_refresh={self.force_refresh_ms}ms)"
        )

    # Public surface

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def state_cell(self) -> Optional[StateCell]:
        return self._cell

    @property
    def current_state(self) -> Optional[UIState]:
        return self._cell.state if self._cell else None

    @property
    def version(self) -> int:
        return self._cell.version if self._cell else 0

    @property
    def has_pending_update(self) -> bool:
        return self._pending_batch is not None

    def add_listener(self, listener: StateListener) -> None:
        """Register a renderer callback (plain function or coroutine function)"""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> bool:
        try:
            self._listeners.remove(listener)
            return True
        except ValueError:
            return False

    def set_catalog(self, catalog: Sequence[App]) -> None:
        """Replace the catalog used for batches that do not carry their own"""
        self._catalog = tuple(catalog)

    async def start(self) -> None:
        """Start the update task"""
        if self._running:
            return
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._process_events())
        self._background_tasks.add(self._worker)
        self._running = True
        logger.info("Incremental updater started")

    async def stop(self) -> None:
        """Stop the update task and discard any pending debounced batch"""
        if not self._running:
            return
        self._running = False
        self._pending_batch = None

        for task in self._background_tasks:
            task.cancel()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

        self._background_tasks.clear()
        self._debounce_task = None
        self._worker = None
        logger.info("Incremental updater stopped")

    def submit(self, batch: PredictionBatch) -> None:
        """
        Hand a new prediction batch to the update task.

        Never waits: the batch is queued even while a debounce is pending.

        Raises:
            RuntimeError: if the updater is not running
        """
        if not self._running or self._queue is None:
            raise RuntimeError("Incremental updater is not running")
        self.stats.batches_received += 1
        self._queue.put_nowait(_BatchArrived(batch))

    async def wait_until_idle(self) -> None:
        """Wait until every queued batch and pending debounce has been handled"""
        while self._running:
            await self._queue.join()
            pending = self._debounce_task
            if pending is None or pending.done():
                if self._queue.empty():
                    return
                continue
            await asyncio.wait({pending})

    def decide(self, batch: PredictionBatch, now_ms: float) -> UpdateDecision:
        """Classify a new batch against the current state"""
        if self._cell is None:
            return UpdateDecision.INITIAL
        if has_significant_routine_change(self._cell.state.theme.name, batch.routine):
            return UpdateDecision.ROUTINE_CHANGE
        if now_ms - self._cell.updated_at_ms > self.force_refresh_ms:
            return UpdateDecision.IMMEDIATE
        return UpdateDecision.DEBOUNCED

    # Update task

    async def _process_events(self) -> None:
        """Consume batches and debounce expirations in arrival order"""
        logger.info("Started UI update task")

        try:
            while True:
                event = await self._queue.get()
                try:
                    if isinstance(event, _DebounceElapsed):
                        await self._handle_debounce_elapsed(event)
                    else:
                        await self._handle_batch(event.batch)
                except Exception as e:
                    logger.error(f"Error processing UI update event: {e}")
                finally:
                    self._queue.task_done()

        except asyncio.CancelledError:
            logger.info("UI update task cancelled")

    async def _handle_batch(self, batch: PredictionBatch) -> UpdateDecision:
        now = self._clock()
        decision = self.decide(batch, now)
        logger.debug(
            f"Batch of {len(batch.predictions)} predictions for {batch.routine.value}: "
            f"{decision.value}"
        )

        if decision == UpdateDecision.DEBOUNCED:
            self._schedule_debounce(batch)
        else:
            self._discard_pending("immediate update")
            await self._apply(batch, decision, now)
        return decision

    def _schedule_debounce(self, batch: PredictionBatch) -> None:
        self._discard_pending("newer batch")
        self._pending_token += 1
        self._pending_batch = batch
        task = asyncio.create_task(self._debounce(self._pending_token))
        self._debounce_task = task
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _debounce(self, token: int) -> None:
        await asyncio.sleep(self.debounce_ms / 1000.0)
        if self._running and self._queue is not None:
            self._queue.put_nowait(_DebounceElapsed(token))

    def _discard_pending(self, reason: str) -> None:
        if self._pending_batch is None:
            return
        self.stats.superseded_batches += 1
        logger.debug(f"Discarding pending batch superseded by {reason}")
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._pending_batch = None
        self._debounce_task = None

    async def _handle_debounce_elapsed(self, event: _DebounceElapsed) -> UpdateDecision:
        if event.token != self._pending_token or self._pending_batch is None:
            logger.debug(f"Ignoring stale debounce expiry {event.token}")
            return UpdateDecision.SUPERSEDED

        batch = self._pending_batch
        self._pending_batch = None
        self._debounce_task = None
        await self._apply(batch, UpdateDecision.DEBOUNCED, self._clock())
        return UpdateDecision.DEBOUNCED

    async def _apply(self, batch: PredictionBatch, decision: UpdateDecision, now_ms: float) -> None:
        catalog = batch.catalog if batch.catalog is not None else self._catalog
        state = self._generate(batch, decision, catalog)
        if state is None:
            return
        self._catalog = catalog

        self._cell = StateCell(
            state=state,
            version=self.version + 1,
            updated_at_ms=now_ms,
        )
        if decision == UpdateDecision.INITIAL:
            self.stats.initial_generations += 1
        elif decision == UpdateDecision.DEBOUNCED:
            self.stats.debounced_updates += 1
        else:
            self.stats.immediate_updates += 1

        await self._emit(state)

    def _generate(
        self,
        batch: PredictionBatch,
        decision: UpdateDecision,
        catalog: Sequence[App]
    ) -> Optional[UIState]:
        """
        Build the next state, degrading to an empty-prediction state on failure.

        Immediate decisions regenerate the whole state; only debounced
        batches go through the selective merge.
        """
        try:
            if self._cell is None or decision != UpdateDecision.DEBOUNCED:
                return self._full_generator(batch.predictions, batch.routine, catalog)
            return self._selective_updater(
                self._cell.state, batch.predictions, batch.routine, catalog
            )
        except Exception as e:
            self.stats.generation_failures += 1
            logger.error(f"UI generation failed for {batch.routine.value} batch: {e}")

        try:
            state = self._full_generator((), batch.routine, catalog)
            self.stats.fallback_generations += 1
            logger.warning(f"Recovered with empty-prediction UI state for {batch.routine.value}")
            return state
        except Exception as e:
            self.stats.generation_failures += 1
            logger.error(f"Fallback UI generation failed, keeping previous state: {e}")
            return None

    async def _emit(self, state: UIState) -> None:
        self.stats.emissions += 1
        for listener in list(self._listeners):
            try:
                result = listener(state)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                self.stats.listener_errors += 1
                logger.error(f"UI state listener failed: {e}")
