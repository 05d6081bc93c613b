"""
Tests for the Incremental Updater

Covers update scheduling (initial, immediate, debounced, superseded),
generation fallback, listener isolation and lifecycle.
"""

import asyncio

import pytest
import pytest_asyncio

from adaptive_launcher.incremental_updater import IncrementalUpdater, UpdateDecision
from adaptive_launcher.launcher_models import ActionPrediction, App, PredictionBatch, RoutineContext
from adaptive_launcher.ui_state_generator import generate_ui_state


def _batch(routine, *predictions, catalog=None):
    return PredictionBatch(
        predictions=[ActionPrediction(action=a, confidence=c) for a, c in predictions],
        routine=routine,
        catalog=catalog,
    )


MORNING_BATCH = _batch(
    RoutineContext.MORNING, ("Start meditation", 0.89), ("Check work messages", 0.75)
)


class FakeClock:
    """Manually advanced millisecond clock"""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class FlakyGenerator:
    """Full generator that fails on demand"""

    def __init__(self):
        self.fail = False

    def __call__(self, predictions, routine, catalog):
        if self.fail:
            raise ValueError("corrupt app entry")
        return generate_ui_state(predictions, routine, catalog)


@pytest.fixture
def emitted():
    return []


@pytest_asyncio.fixture
async def updater(catalog, emitted):
    """Running updater with a recording listener"""
    updater = IncrementalUpdater(catalog=catalog, debounce_ms=150, force_refresh_ms=2000)
    updater.add_listener(emitted.append)
    await updater.start()
    yield updater
    await updater.stop()


class TestUpdateScheduling:
    """Immediate versus debounced updates"""

    @pytest.mark.asyncio
    async def test_first_batch_generates_immediately(self, updater, emitted):
        """First batch of a session produces a full state without debounce"""
        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()

        assert len(emitted) == 1
        assert updater.current_state is emitted[0]
        assert updater.version == 1
        assert updater.stats.initial_generations == 1
        assert emitted[0].theme.name == "Morning Fresh"
        assert emitted[0].layout.grid_columns == 2

    @pytest.mark.asyncio
    async def test_rapid_batches_emit_once_with_latest(self, updater, emitted):
        """Two batches 50ms apart collapse into a single emission of the newer one"""
        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()

        updater.submit(_batch(RoutineContext.MORNING, ("Check email", 0.75)))
        await asyncio.sleep(0.05)
        updater.submit(_batch(RoutineContext.MORNING, ("Join team meeting", 0.9)))
        await asyncio.sleep(0.05)

        assert len(emitted) == 1
        assert updater.has_pending_update

        await updater.wait_until_idle()

        assert len(emitted) == 2
        assert [card.action for card in emitted[-1].primary_actions] == ["Join team meeting"]
        assert updater.version == 2
        assert updater.stats.superseded_batches == 1
        assert updater.stats.debounced_updates == 1
        assert not updater.has_pending_update

    @pytest.mark.asyncio
    async def test_routine_change_applies_immediately(self, updater, emitted):
        """Routine switch cancels the pending batch and updates at once"""
        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()

        updater.submit(_batch(RoutineContext.MORNING, ("Check email", 0.75)))
        updater.submit(_batch(RoutineContext.EVENING, ("Watch a movie", 0.85)))
        await updater.wait_until_idle()

        assert len(emitted) == 2
        assert emitted[-1].theme.name == "Evening Calm"
        assert updater.stats.immediate_updates == 1
        assert updater.stats.debounced_updates == 0
        assert updater.stats.superseded_batches == 1

        await asyncio.sleep(0.2)
        assert len(emitted) == 2

    @pytest.mark.asyncio
    async def test_routine_change_replaces_whole_state(self, updater, emitted):
        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()

        updater.submit(_batch(RoutineContext.EVENING, ("Start meditation", 0.89), ("Check work messages", 0.75)))
        await updater.wait_until_idle()

        assert emitted[-1].primary_actions is not emitted[0].primary_actions
        assert emitted[-1].app_grid.group_by_category is False
        assert emitted[-1].theme.hue == pytest.approx(30.0)

    @pytest.mark.asyncio
    async def test_debounced_update_keeps_unchanged_cards(self, updater, emitted):
        """Debounced batches go through the selective merge"""
        updater.submit(_batch(
            RoutineContext.MORNING, ("Start meditation", 0.75), ("Check work messages", 0.72)
        ))
        await updater.wait_until_idle()

        updater.submit(_batch(
            RoutineContext.MORNING, ("Start meditation", 0.78), ("Check work messages", 0.7)
        ))
        await updater.wait_until_idle()

        assert len(emitted) == 2
        assert emitted[1] is not emitted[0]
        assert emitted[1].primary_actions is emitted[0].primary_actions
        assert emitted[1].theme is emitted[0].theme

    @pytest.mark.asyncio
    async def test_submit_does_not_wait_for_debounce(self, updater):
        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()

        updater.submit(_batch(RoutineContext.MORNING, ("Check email", 0.75)))
        await asyncio.sleep(0.01)
        assert updater.has_pending_update

        updater.submit(_batch(RoutineContext.MORNING, ("Check email", 0.8)))
        assert updater.stats.batches_received == 3

    @pytest.mark.asyncio
    async def test_empty_batch_yields_neutral_state(self, updater, emitted):
        updater.submit(_batch(RoutineContext.AFTERNOON))
        await updater.wait_until_idle()

        assert emitted[0].primary_actions == ()
        assert emitted[0].secondary_actions == ()
        assert emitted[0].layout.show_action_cards is False

    @pytest.mark.asyncio
    async def test_batch_catalog_replaces_catalog(self, updater, emitted):
        only = App("pkg.only", "Only")
        updater.submit(_batch(RoutineContext.MORNING, catalog=[only]))
        await updater.wait_until_idle()

        assert emitted[0].app_grid.apps == (only,)


class TestStaleness:
    """Force refresh after the staleness window"""

    @pytest.mark.asyncio
    async def test_stale_state_updates_immediately(self, catalog):
        clock = FakeClock()
        updater = IncrementalUpdater(catalog=catalog, debounce_ms=150, force_refresh_ms=2000, clock=clock)
        await updater.start()
        try:
            updater.submit(MORNING_BATCH)
            await updater.wait_until_idle()

            clock.now = 2500.0
            updater.submit(_batch(RoutineContext.MORNING, ("Check email", 0.75)))
            await updater.wait_until_idle()

            assert updater.stats.immediate_updates == 1
            assert updater.stats.debounced_updates == 0
            assert updater.state_cell.updated_at_ms == 2500.0
            assert updater.version == 2
        finally:
            await updater.stop()

    @pytest.mark.asyncio
    async def test_stale_refresh_regenerates_whole_state(self, catalog, emitted):
        """Stale refresh recomputes theme and layout instead of carrying them over"""
        clock = FakeClock()
        updater = IncrementalUpdater(catalog=catalog, debounce_ms=150, force_refresh_ms=2000, clock=clock)
        updater.add_listener(emitted.append)
        await updater.start()
        try:
            updater.submit(_batch(
                RoutineContext.MORNING, ("Start meditation", 0.95), ("Check work messages", 0.9)
            ))
            await updater.wait_until_idle()
            assert emitted[0].layout.show_widgets is False

            clock.now = 5000.0
            updater.submit(_batch(RoutineContext.MORNING))
            await updater.wait_until_idle()

            expected = generate_ui_state([], RoutineContext.MORNING, catalog)
            assert emitted[-1] == expected
            assert emitted[-1].layout.show_widgets is True
            assert emitted[-1].layout.show_action_cards is False
            assert emitted[-1].theme == expected.theme
        finally:
            await updater.stop()

    @pytest.mark.asyncio
    async def test_staleness_boundary_is_exclusive(self, catalog):
        clock = FakeClock()
        updater = IncrementalUpdater(catalog=catalog, debounce_ms=150, force_refresh_ms=2000, clock=clock)
        await updater.start()
        try:
            updater.submit(MORNING_BATCH)
            await updater.wait_until_idle()

            assert updater.decide(MORNING_BATCH, 2000.0) == UpdateDecision.DEBOUNCED
            assert updater.decide(MORNING_BATCH, 2000.5) == UpdateDecision.IMMEDIATE
            evening = _batch(RoutineContext.EVENING)
            assert updater.decide(evening, 10.0) == UpdateDecision.ROUTINE_CHANGE
        finally:
            await updater.stop()

    def test_first_decision_is_initial(self, catalog):
        updater = IncrementalUpdater(catalog=catalog)
        assert updater.decide(MORNING_BATCH, 0.0) == UpdateDecision.INITIAL


class TestFailureHandling:
    """Generation fallback and listener isolation"""

    @pytest.mark.asyncio
    async def test_generation_failure_falls_back_to_empty_predictions(self, catalog, emitted):
        """A failing generator is retried once with an empty batch"""
        def generator(predictions, routine, catalog):
            if predictions:
                raise ValueError("corrupt app entry")
            return generate_ui_state(predictions, routine, catalog)

        updater = IncrementalUpdater(catalog=catalog, full_generator=generator)
        updater.add_listener(emitted.append)
        await updater.start()
        try:
            updater.submit(MORNING_BATCH)
            await updater.wait_until_idle()
        finally:
            await updater.stop()

        assert len(emitted) == 1
        assert emitted[0].primary_actions == ()
        assert emitted[0].theme.name == "Morning Fresh"
        assert updater.stats.generation_failures == 1
        assert updater.stats.fallback_generations == 1

    @pytest.mark.asyncio
    async def test_failed_fallback_keeps_previous_state(self, catalog, emitted):
        def broken_update(current, predictions, routine, catalog):
            raise ValueError("corrupt app entry")

        generator = FlakyGenerator()
        updater = IncrementalUpdater(
            catalog=catalog,
            debounce_ms=20,
            full_generator=generator,
            selective_updater=broken_update,
        )
        updater.add_listener(emitted.append)
        await updater.start()
        try:
            updater.submit(MORNING_BATCH)
            await updater.wait_until_idle()
            first = updater.current_state

            generator.fail = True
            updater.submit(_batch(RoutineContext.MORNING, ("Check email", 0.75)))
            await updater.wait_until_idle()

            assert updater.current_state is first
            assert updater.version == 1
            assert len(emitted) == 1
            assert updater.stats.generation_failures == 2
            assert updater.stats.fallback_generations == 0
        finally:
            await updater.stop()

    @pytest.mark.asyncio
    async def test_failed_update_keeps_previous_catalog(self, catalog, emitted):
        """A batch catalog is only adopted once its state has been generated"""
        clock = FakeClock()
        generator = FlakyGenerator()
        updater = IncrementalUpdater(
            catalog=catalog, force_refresh_ms=2000, clock=clock, full_generator=generator
        )
        updater.add_listener(emitted.append)
        await updater.start()
        try:
            updater.submit(MORNING_BATCH)
            await updater.wait_until_idle()

            generator.fail = True
            clock.now = 3000.0
            updater.submit(_batch(RoutineContext.MORNING, catalog=[App("pkg.only", "Only")]))
            await updater.wait_until_idle()
            assert updater.version == 1

            generator.fail = False
            clock.now = 6000.0
            updater.submit(_batch(RoutineContext.MORNING))
            await updater.wait_until_idle()

            assert updater.version == 2
            assert sorted(app.package_id for app in emitted[-1].app_grid.apps) == sorted(
                app.package_id for app in catalog
            )
        finally:
            await updater.stop()

    @pytest.mark.asyncio
    async def test_listener_error_does_not_block_others(self, updater, emitted):
        def broken(state):
            raise RuntimeError("renderer crashed")

        updater.add_listener(broken)
        second = []
        updater.add_listener(second.append)

        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()

        assert len(emitted) == 1
        assert len(second) == 1
        assert updater.stats.listener_errors == 1
        assert updater.stats.emissions == 1

    @pytest.mark.asyncio
    async def test_async_listener_is_awaited(self, updater):
        received = []

        async def listener(state):
            await asyncio.sleep(0)
            received.append(state)

        updater.add_listener(listener)
        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()

        assert received == [updater.current_state]

    @pytest.mark.asyncio
    async def test_removed_listener_is_not_called(self, updater, emitted):
        assert updater.remove_listener(emitted.append) is True
        assert updater.remove_listener(emitted.append) is False

        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()

        assert emitted == []
        assert updater.version == 1


class TestLifecycle:
    """Start/stop behaviour"""

    def test_submit_before_start_raises(self, catalog):
        updater = IncrementalUpdater(catalog=catalog)
        with pytest.raises(RuntimeError):
            updater.submit(MORNING_BATCH)

    @pytest.mark.asyncio
    async def test_stop_discards_pending_batch(self, catalog, emitted):
        updater = IncrementalUpdater(catalog=catalog, debounce_ms=150)
        updater.add_listener(emitted.append)
        await updater.start()

        updater.submit(MORNING_BATCH)
        await updater.wait_until_idle()
        updater.submit(_batch(RoutineContext.MORNING, ("Check email", 0.75)))
        await asyncio.sleep(0.01)
        await updater.stop()
        await asyncio.sleep(0.2)

        assert len(emitted) == 1
        assert not updater.is_running
        assert not updater.has_pending_update
        with pytest.raises(RuntimeError):
            updater.submit(MORNING_BATCH)

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, catalog):
        updater = IncrementalUpdater(catalog=catalog)
        await updater.start()
        await updater.start()
        assert updater.is_running
        await updater.stop()
        await updater.stop()
        assert not updater.is_running
