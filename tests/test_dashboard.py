"""Tests for the dashboard session."""

import pytest

from traquila.models import BottleType, PourContext
from traquila.schemas.bottle import BottleCreate, BottleUpdate
from traquila.schemas.insights import (
    DashboardFilters,
    ExperiencePlace,
    ExperienceRatingFilter,
    ExperienceTimeRange,
)
from traquila.schemas.tasting import PourCreate, PourUpdate
from traquila.services.dashboard import DashboardSession, source_fingerprint

from conftest import NOW


@pytest.fixture
def bottle(store):
    return store.create_bottle(BottleCreate(name="Tapatio Blanco", type=BottleType.BLANCO))


class TestRefresh:
    """Test when the session recomputes."""

    def test_initial_result_is_empty(self, session):
        assert session.result.filtered_tastings_count == 0
        assert session.recompute_count == 0
        assert session.filters == DashboardFilters()

    def test_refresh_skips_unchanged_inputs(self, session, store, bottle):
        store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1, enjoyment=4))

        first = session.refresh()
        second = session.refresh()

        assert first.filtered_tastings_count == 1
        assert second is first
        assert session.recompute_count == 1

    def test_new_pour_triggers_recompute(self, session, store, bottle):
        session.refresh()
        store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1))

        result = session.refresh()

        assert result.filtered_tastings_count == 1
        assert session.recompute_count == 2

    def test_pour_edit_triggers_recompute(self, session, store, bottle):
        pour = store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1, enjoyment=2))
        session.refresh()

        store.update_pour(pour.id, PourUpdate(enjoyment=5))
        result = session.refresh()

        assert result.top_experience.rating == 5
        assert session.recompute_count == 2

    def test_bottle_edit_triggers_recompute(self, session, store, bottle, clock):
        store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1))
        session.refresh()

        clock.advance(minutes=1)
        store.update_bottle(bottle.id, BottleUpdate(rating=4.5))
        result = session.refresh()

        assert result.top_experience.rating == 4.5

    def test_restaurant_pour_amount_edit_triggers_recompute(self, session, store, bottle):
        """Test an edit that leaves every bottle untouched still refreshes the rows."""
        pour = store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1, context=PourContext.RESTAURANT))
        session.refresh()

        store.update_pour(pour.id, PourUpdate(amount_oz=3))
        result = session.refresh()

        assert result.top_experience.record.amount_oz == 3
        assert session.recompute_count == 2

    def test_day_rollover_triggers_recompute(self, session, store, bottle, clock):
        store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1))
        session.refresh()

        clock.advance(days=31)
        session.update_filters(time_range=ExperienceTimeRange.D30)

        assert session.result.filtered_tastings_count == 0

    def test_force(self, session):
        session.refresh()
        session.refresh(force=True)
        assert session.recompute_count == 2


class TestFilters:
    """Test filter changes."""

    def test_update_filters_coerces_values(self, session, store, bottle):
        store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1, enjoyment=5))
        store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1, enjoyment=2))

        result = session.update_filters(rating_filter="four_plus")

        assert session.filters.rating_filter == ExperienceRatingFilter.FOUR_PLUS
        assert result.filtered_tastings_count == 1

    def test_same_filters_do_not_recompute(self, session):
        session.refresh()
        session.set_filters(DashboardFilters())
        assert session.recompute_count == 1

    def test_toggle_expression(self, session):
        session.toggle_expression(BottleType.ANEJO)
        assert session.filters.selected_expressions == frozenset({BottleType.ANEJO})
        session.toggle_expression(BottleType.ANEJO)
        assert session.filters.selected_expressions == frozenset()

    def test_toggle_place(self, session, store, bottle):
        store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1))
        result = session.toggle_place(ExperiencePlace.BAR)
        assert session.filters.selected_places == frozenset({ExperiencePlace.BAR})
        assert result.filtered_tastings_count == 0


class TestSubscribers:
    """Test result publication."""

    def test_subscriber_receives_results(self, session):
        received = []
        unsubscribe = session.subscribe(received.append)

        session.refresh()
        unsubscribe()
        session.refresh(force=True)

        assert len(received) == 1

    def test_failing_subscriber_does_not_block_others(self, session):
        received = []

        def broken(_result):
            raise RuntimeError("boom")

        session.subscribe(broken)
        session.subscribe(received.append)
        session.refresh()

        assert len(received) == 1


class TestFingerprint:
    """Test the input fingerprint."""

    def test_fingerprint_ignores_order(self, make_bottle, make_record):
        bottles = [make_bottle("A"), make_bottle("B")]
        records = [make_record(bottles[0]), make_record(bottles[1])]
        assert source_fingerprint(bottles, records, NOW) == source_fingerprint(
            list(reversed(bottles)), list(reversed(records)), NOW
        )

    def test_fingerprint_tracks_notes(self, make_bottle, make_record):
        bottle = make_bottle()
        record = make_record(bottle)
        before = source_fingerprint([bottle], [record], NOW)
        record.notes = "smoky"
        assert source_fingerprint([bottle], [record], NOW) != before

    def test_session_uses_pipeline_options(self, store, clock, bottle):
        for _ in range(4):
            store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=0.5))
        session = DashboardSession(store, clock=clock, pipeline_options={"top_limit": 2})
        assert len(session.refresh().top_experiences) == 2
