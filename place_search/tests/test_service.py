"""
End-to-end tests for PlaceSearchIndex over the fixture dataset.
"""

from __future__ import annotations

import asyncio

import pytest

from place_search.config import SearchConfig
from place_search.models import LoadState, SearchOptions
from place_search.sources import StaticSource


def _ids(results):
    return [(r.place.name, r.place.country_code, r.place.region_code) for r in results]


class TestShortAndOddQueries:
    @pytest.mark.parametrize("query", ["", "p", " p ", "  ", ",", " , , "])
    def test_short_queries_return_nothing(self, search, query):
        assert search(query) == []

    @pytest.mark.parametrize("query", ["xyzqwerty", "par!@#", "!!!", "   ,,,   ", "\t\n", "paris,,,,,,"])
    def test_odd_input_never_raises(self, search, query):
        results = search(query)
        assert isinstance(results, list)

    def test_nonsense_is_empty(self, search):
        assert search("xyzqwerty") == []

    def test_whitespace_is_trimmed(self, search):
        assert _ids(search("  paris  ")) == _ids(search("paris"))


class TestRanking:
    def test_scores_strictly_positive(self, search):
        for query in ["pa", "par", "paris", "san", "houston, tx", "lo"]:
            assert all(r.score > 0 for r in search(query))

    def test_case_insensitive(self, search):
        expected = _ids(search("paris"))
        assert expected
        assert _ids(search("PARIS")) == expected
        assert _ids(search("PaRiS")) == expected

    def test_deterministic(self, search):
        first = search("san", limit=20)
        second = search("san", limit=20)
        assert first == second

    def test_exact_match_first(self, search):
        results = search("paris")
        assert results[0].place.name == "Paris"
        assert results[0].place.country == "France"

    def test_limit_respected(self, search):
        five = search("san", limit=5)
        twenty = search("san", limit=20)
        assert len(five) <= 5
        assert len(five) <= len(twenty)
        assert len(twenty) == 8

    def test_non_positive_limit_is_empty(self, search):
        assert search("san", limit=0) == []
        assert search("san", limit=-1) == []

    def test_options_object(self, search):
        results = search("san", options=SearchOptions(limit=2, country_codes=["CL"]))
        assert _ids(results) == [("Santiago", "CL", "RM")]

    def test_default_limit(self, index_factory):
        index = index_factory(settings=SearchConfig(default_limit=3))
        assert len(asyncio.run(index.search("san"))) == 3

    def test_limit_capped(self, index_factory):
        index = index_factory(settings=SearchConfig(max_limit=4))
        assert len(asyncio.run(index.search("san", limit=50))) == 4


class TestDisambiguation:
    def test_naples_italy_vs_florida(self, search):
        italy = search("naples, italy")
        florida = search("naples, fl")

        naples_it = next(r for r in italy if r.place.country == "Italy")
        naples_fl = next(r for r in florida if r.place.region_code == "FL")

        assert naples_it.place.coordinates != naples_fl.place.coordinates
        assert all(r.place.country_code == "IT" for r in italy)
        assert all(r.place.region_code == "FL" for r in florida)

    def test_houston_tx(self, search):
        results = search("houston, tx")
        assert _ids(results) == [("Houston", "US", "TX")]
        assert results[0].display_name == "Houston, TX, United States"

    def test_houston_al_excludes_texas(self, search):
        results = search("houston, al")
        assert ("Houston", "US", "TX") not in _ids(results)
        assert _ids(results) == [("Houston County", "US", "AL")]

    def test_paris_tx_excludes_france(self, search):
        assert _ids(search("paris, tx")) == [("Paris", "US", "TX")]

    def test_paris_france(self, search):
        assert _ids(search("paris, france")) == [("Paris", "FR", "11")]

    def test_unmatched_qualifier_excludes_everything(self, search):
        assert search("paris, de") == []

    def test_three_part_query(self, search):
        results = search("naples, fl, united states")
        assert _ids(results) == [("Naples", "US", "FL")]
        assert search("naples, fl, canada") == []


class TestCountryCodeOption:
    def test_us_only(self, search):
        results = search("paris", country_codes=["US"])
        assert results
        assert all(r.place.country_code == "US" for r in results)

    def test_lowercase_codes(self, search):
        assert _ids(search("paris", country_codes=["fr"])) == [("Paris", "FR", "11")]

    def test_no_matching_country(self, search):
        assert search("paris", country_codes=["JP"]) == []


class TestResultShape:
    def test_fields(self, search):
        tokyo = search("tokyo")[0]
        assert tokyo.place.country == "Japan"
        assert 35 < tokyo.place.coordinates.lat < 36
        assert 139 < tokyo.place.coordinates.lng < 140
        assert tokyo.display_name == "Tokyo, Japan"

    def test_zero_coordinates_are_returned(self, search):
        mystery = search("mystery point")[0]
        assert (mystery.place.coordinates.lat, mystery.place.coordinates.lng) == (0.0, 0.0)
        assert mystery.display_name == "Mystery Point, ZZ"

    def test_results_do_not_alias_each_other(self, search):
        first = search("austin, tx")[0]
        second = search("austin, tx")[0]
        assert first == second
        assert first.place is not second.place


class TestLifecycle:
    def test_search_before_preload_builds_once(self, index_factory):
        index = index_factory()
        assert index.state is LoadState.IDLE
        results = asyncio.run(index.search("paris"))
        assert results
        assert index.is_ready()
        assert index.build_count == 1

    def test_concurrent_preload_and_search(self, index_factory):
        index = index_factory()

        async def scenario():
            return await asyncio.gather(
                index.preload(), index.preload(), index.search("houston")
            )

        _, _, results = asyncio.run(scenario())
        assert len(results) == 3
        assert index.build_count == 1

    def test_stats(self, index_factory):
        index = index_factory()
        assert index.stats().state is LoadState.IDLE
        assert index.stats().places == 0

        index.ensure_ready_sync()
        stats = index.stats()
        assert stats.state is LoadState.READY
        assert stats.places == 23
        assert stats.skipped_records == 4
        assert stats.name_prefixes > 0
        assert stats.build_seconds is not None

    def test_independent_instances(self, index_factory):
        small = index_factory(rows=[{"name": "Oslo", "country_code": "NO", "latitude": 59.9, "longitude": 10.7}])
        small.ensure_ready_sync()
        assert [r.place.name for r in asyncio.run(small.search("oslo"))] == ["Oslo"]
        assert asyncio.run(small.search("paris")) == []

    def test_failed_source_never_becomes_ready(self):
        from place_search.service import PlaceSearchIndex

        class BrokenSource:
            def load(self):
                raise OSError("disk on fire")

        index = PlaceSearchIndex(BrokenSource(), resolver=lambda code: None, settings=SearchConfig())

        async def scenario():
            await asyncio.wait_for(index.preload(), timeout=0.3)

        with pytest.raises(asyncio.TimeoutError):
            asyncio.run(scenario())
        assert index.is_loading()
        assert not index.is_ready()

    def test_static_source_roundtrip(self, place_rows):
        assert len(StaticSource(place_rows).load()) == len(place_rows)
