"""Tests for the search orchestrator and per-caller sessions."""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, List
from unittest.mock import MagicMock

import pytest

from trip_search.domain.errors import InterpreterUnavailableError
from trip_search.domain.models import Interpretation, SearchFilters
from trip_search.services import SearchSession, TripSearchService
from trip_search.services.search_service import (
    EDIT_FAILED_EXPLANATION,
    NO_MATCH_HINT,
    describe_filter_count,
)


def _ids(trips):
    return [trip.id for trip in trips]


def _reply(filters, explanation="Filtering trips"):
    return json.dumps({"filters": filters, "explanation": explanation})


async def _collect(stream) -> List[Any]:
    return [result async for result in stream]


def _phases(results):
    return [result.phase for result in results]


@dataclass
class _SlowInterpreter:
    """Interpreter that yields to the event loop before answering."""

    delay: float = 0.01

    async def interpret(self, query):
        await asyncio.sleep(self.delay)
        return Interpretation(
            filters=SearchFilters(),
            explanation=f"Interpreted: {query}",
            source="oracle",
        )


class TestSearch:
    def test_empty_query_returns_full_catalog(self, make_service, catalog):
        service, oracle = make_service(_reply({"maxPrice": 1}))

        for query in ("", "   "):
            result = asyncio.run(service.search(query))

            assert result.success is True
            assert result.trips == catalog
            assert result.filters.to_dict() == {}
            assert result.explanation == ""

        assert oracle.calls == []

    def test_oracle_filters_are_applied_and_ranked(self, make_service):
        service, _ = make_service(
            _reply({"types": ["wildlife"], "maxPrice": 3000}, "Wildlife under $3,000")
        )

        result = asyncio.run(service.search("Show me safaris under $3,000"))

        assert result.success is True
        assert result.source == "oracle"
        assert result.phase == "final"
        assert result.explanation == "Wildlife under $3,000"
        assert result.filters.to_dict() == {"maxPrice": 3000, "types": ["wildlife"]}
        assert _ids(result.trips) == ["1"]

    def test_price_ranking_on_final_result(self, make_service):
        service, _ = make_service(_reply({"maxPrice": 3000}))

        result = asyncio.run(service.search("anything under three grand"))

        assert _ids(result.trips) == ["5", "7", "4", "8", "1", "9", "6"]

    def test_interpreter_failure_degrades_to_parser(self, make_service, parser):
        service, _ = make_service(
            InterpreterUnavailableError("timeout", provider="stub")
        )
        query = "Luxury trips in Asia"

        result = asyncio.run(service.search(query))

        assert result.success is True
        assert result.source == "rule_based"
        assert result.filters == parser.parse(query)
        assert result.filters.destinations == ("Japan", "Maldives", "Indonesia")
        assert result.filters.types == ("luxury",)
        assert _ids(result.trips) == ["2"]
        assert result.error is None

    def test_no_oracle_uses_parser(self, make_service):
        service, _ = make_service()

        result = asyncio.run(service.search("Beach destinations for summer"))

        assert result.source == "rule_based"
        assert _ids(result.trips) == ["8"]

    def test_no_match_is_not_an_error(self, make_service):
        service, _ = make_service(
            _reply({"types": ["beach"], "destinations": ["Japan"]})
        )

        result = asyncio.run(service.search("beach holidays in japan"))

        assert result.success is True
        assert result.is_empty
        assert result.hint == NO_MATCH_HINT

    def test_foreign_interpreter_exception_is_contained(self, catalog, parser):
        interpreter = MagicMock()

        async def _explode(query):
            raise RuntimeError("interpreter crashed")

        interpreter.interpret = _explode
        service = TripSearchService(catalog=catalog, parser=parser, interpreter=interpreter)

        result = asyncio.run(service.search("Luxury trips in Asia"))

        assert result.success is True
        assert result.source == "rule_based"
        assert _ids(result.trips) == ["2"]

    def test_core_fault_uses_keyword_scan(self, make_service, monkeypatch):
        service, _ = make_service(_reply({"maxPrice": 3000}))

        def _broken(trips, filters):
            raise RuntimeError("ranking exploded")

        monkeypatch.setattr(
            "trip_search.services.search_service.rank_trips", _broken
        )

        result = asyncio.run(service.search("Kenya"))

        assert result.success is False
        assert result.source == "keyword_scan"
        assert result.error == "ranking exploded"
        assert result.explanation == "Fallback search results for: Kenya"
        assert result.filters.to_dict() == {}
        assert _ids(result.trips) == ["1"]

    def test_result_carries_caller_generation(self, make_service):
        service, _ = make_service()

        result = asyncio.run(service.search("beach", generation=7))

        assert result.generation == 7


class TestSearchSession:
    def test_generation_increases_per_search(self, make_service):
        service, _ = make_service()
        session = SearchSession(service)

        first = asyncio.run(session.search("beach"))
        second = asyncio.run(session.search("beach"))

        assert second.generation == first.generation + 1
        assert session.is_current(second)
        assert not session.is_current(first)

    def test_preview_then_final(self, make_service):
        service, _ = make_service(
            _reply({"types": ["wellness"]}, "Wellness retreats")
        )
        session = SearchSession(service)

        results = asyncio.run(_collect(session.search_stream("yoga and spa retreat in bali")))

        preview, final = results
        assert preview.phase == "preview"
        assert preview.source == "rule_based"
        assert preview.filters.activities == ("yoga", "spa")
        assert _ids(preview.trips) == ["5", "2"]

        assert final.phase == "final"
        assert final.source == "oracle"
        assert _ids(final.trips) == ["5"]
        assert preview.generation == final.generation

    def test_empty_query_yields_single_result(self, make_service, catalog):
        service, oracle = make_service(_reply({"maxPrice": 1}))
        session = SearchSession(service)

        results = asyncio.run(_collect(session.search_stream("")))

        assert len(results) == 1
        assert results[0].trips == catalog
        assert oracle.calls == []

    def test_edit_during_search_discards_final_result(self, catalog, parser):
        @dataclass
        class _EditingInterpreter:
            """Simulates a filter edit arriving while the oracle is busy."""

            session: Any = None

            async def interpret(self, query):
                self.session.refine(SearchFilters())
                return Interpretation(filters=SearchFilters(), explanation="late")

        interpreter = _EditingInterpreter()
        service = TripSearchService(catalog=catalog, parser=parser, interpreter=interpreter)
        session = SearchSession(service)
        interpreter.session = session

        results = asyncio.run(_collect(session.search_stream("Luxury trips in Asia")))

        assert _phases(results) == ["preview"]

    def test_newer_search_in_same_session_wins(self, catalog, parser):
        service = TripSearchService(
            catalog=catalog, parser=parser, interpreter=_SlowInterpreter()
        )
        session = SearchSession(service)

        async def _run():
            return await asyncio.gather(
                _collect(session.search_stream("beach")),
                _collect(session.search_stream("luxury")),
            )

        older, newer = asyncio.run(_run())

        assert _phases(older) == ["preview"]
        assert _phases(newer) == ["preview", "final"]
        assert newer[-1].explanation == "Interpreted: luxury"

    def test_concurrent_sessions_do_not_supersede_each_other(self, catalog, parser):
        service = TripSearchService(
            catalog=catalog, parser=parser, interpreter=_SlowInterpreter()
        )
        first_tab, second_tab = SearchSession(service), SearchSession(service)

        async def _run():
            return await asyncio.gather(
                _collect(first_tab.search_stream("beach")),
                _collect(second_tab.search_stream("luxury")),
            )

        first, second = asyncio.run(_run())

        assert _phases(first) == ["preview", "final"]
        assert _phases(second) == ["preview", "final"]
        assert first[-1].explanation == "Interpreted: beach"
        assert second[-1].explanation == "Interpreted: luxury"

    def test_edit_in_one_session_keeps_other_session_current(self, make_service):
        service, _ = make_service()
        first_tab, second_tab = SearchSession(service), SearchSession(service)

        searched = asyncio.run(first_tab.search("beach"))
        second_tab.refine(SearchFilters(max_price=2000))
        second_tab.clear_filters()

        assert first_tab.is_current(searched)

    def test_edit_supersedes_earlier_search(self, make_service):
        service, _ = make_service()
        session = SearchSession(service)

        searched = asyncio.run(session.search("beach"))
        edited = session.refine(SearchFilters())

        assert not session.is_current(searched)
        assert session.is_current(edited)

    def test_preview_sync_matches_stream_preview(self, make_service):
        service, _ = make_service(_reply({"maxPrice": 1}))
        session = SearchSession(service)

        preview = asyncio.run(_collect(session.search_stream("Show me safaris under $3,000")))[0]

        assert _ids(service.preview_sync("Show me safaris under $3,000")) == _ids(preview.trips)


class TestSyncApi:
    def test_preview_sync(self, make_service, catalog):
        service, oracle = make_service(_reply({"maxPrice": 1}))

        assert _ids(service.preview_sync("Show me safaris under $3,000")) == ["1"]
        assert service.preview_sync("  ") == list(catalog)
        assert oracle.calls == []

    def test_apply_filters_never_parses(self, catalog):
        parser = MagicMock()
        interpreter = MagicMock()
        service = TripSearchService(catalog=catalog, parser=parser, interpreter=interpreter)

        trips = service.apply_filters(SearchFilters(min_price=1500, max_price=2500))

        assert _ids(trips) == ["7", "4", "8", "1"]
        parser.parse.assert_not_called()
        parser.parse_with_explanation.assert_not_called()
        interpreter.interpret.assert_not_called()

    def test_catalog_is_not_mutated(self, make_service, catalog):
        service, _ = make_service()
        before = list(service.catalog)

        service.apply_filters(SearchFilters(max_price=3000))
        asyncio.run(service.search("under 2000"))

        assert list(service.catalog) == before == list(catalog)


class TestFilterEdits:
    def test_refine_reports_active_filters(self, make_service):
        service, _ = make_service()

        result = service.refine(SearchFilters(types=("cultural",), max_price=2000))

        assert result.success is True
        assert result.source == "user"
        assert result.explanation == "Showing trips with 2 active filters"
        assert _ids(result.trips) == ["7"]
        assert result.hint is None

    def test_refine_empty_result_has_hint(self, make_service):
        service, _ = make_service()

        result = service.refine(SearchFilters(max_price=2000, destinations=("Greece",)))

        assert result.is_empty
        assert result.hint == NO_MATCH_HINT

    def test_refine_fault_returns_unfiltered_catalog(self, make_service, catalog, monkeypatch):
        service, _ = make_service()

        def _broken(trips, filters):
            raise RuntimeError("ranking exploded")

        monkeypatch.setattr(
            "trip_search.services.search_service.rank_trips", _broken
        )

        result = service.refine(SearchFilters(max_price=2000))

        assert result.success is False
        assert result.source == "none"
        assert result.trips == catalog
        assert result.filters.is_empty
        assert result.explanation == EDIT_FAILED_EXPLANATION
        assert result.error == "ranking exploded"

    def test_remove_filter_by_wire_name(self, make_service):
        service, _ = make_service()
        filters = SearchFilters(types=("cultural",), max_price=2000)

        result = service.remove_filter(filters, "maxPrice")

        assert result.filters == SearchFilters(types=("cultural",))
        assert result.explanation == "Showing trips with 1 active filter"
        assert _ids(result.trips) == ["7", "3"]
        # the original filter set is left untouched
        assert filters.max_price == 2000

    def test_remove_unknown_filter_raises(self, make_service):
        service, _ = make_service()
        with pytest.raises(KeyError):
            service.remove_filter(SearchFilters(), "budget")

    def test_clear_filters_returns_catalog(self, make_service, catalog):
        service, _ = make_service()

        result = service.clear_filters()

        assert result.trips == catalog
        assert result.filters.is_empty
        assert result.explanation == ""

    def test_session_edits_take_new_generations(self, make_service):
        service, _ = make_service()
        session = SearchSession(service)

        refined = session.refine(SearchFilters(seasons=("winter",)))
        removed = session.remove_filter(refined.filters, "seasons")
        cleared = session.clear_filters()

        assert [refined.generation, removed.generation, cleared.generation] == [1, 2, 3]
        assert removed.filters.is_empty
        assert session.current_generation == 3

    def test_edits_never_call_parsers(self, catalog):
        parser = MagicMock()
        interpreter = MagicMock()
        session = SearchSession(
            TripSearchService(catalog=catalog, parser=parser, interpreter=interpreter)
        )

        session.refine(SearchFilters(seasons=("winter",)))
        session.remove_filter(SearchFilters(seasons=("winter",)), "seasons")
        session.clear_filters()

        assert parser.method_calls == []
        assert interpreter.method_calls == []


@pytest.mark.parametrize(
    "filters, expected",
    [
        (SearchFilters(), ""),
        (SearchFilters(keywords=("x",)), "Showing trips with 1 active filter"),
        (
            SearchFilters(max_price=1, min_price=0, seasons=("fall",)),
            "Showing trips with 3 active filters",
        ),
    ],
)
def test_describe_filter_count(filters, expected):
    assert describe_filter_count(filters) == expected
