"""
Tests for the filter engine: genre ANY-match, inclusive years, title search.
"""

import pytest
from pydantic import ValidationError

from conftest import make_movie
from cinescope.filters import FilterEngine, matches_genre_filter
from cinescope.models import FilterSpec


def titles(movies):
	return [m.title for m in movies]


def test_default_spec_keeps_everything_in_order(catalogue):
	assert FilterEngine().apply(catalogue, FilterSpec()) == catalogue


def test_genre_any_match(catalogue):
	result = FilterEngine().apply(catalogue, FilterSpec(selected_genres=["Comedy", "War"]))
	assert titles(result) == ["Alpha", "Delta", "Foxtrot"]


def test_movie_without_tokens_never_matches_a_genre_filter():
	bare = make_movie("Bare", year=2000, rating=7.0, genres=["Drama"], genre_tokens=[])
	assert not matches_genre_filter(bare, {"Drama"})
	assert matches_genre_filter(bare, set())


def test_filter_uses_tokens_not_display_labels():
	movie = make_movie("Labels", genres=["Prison Drama"], genre_tokens=["Drama"])
	assert FilterEngine().apply([movie], FilterSpec(selected_genres=["Drama"])) == [movie]
	assert FilterEngine().apply([movie], FilterSpec(selected_genres=["Prison Drama"])) == []


def test_year_range_is_inclusive_and_drops_unparsable_years(catalogue):
	result = FilterEngine().apply(catalogue, FilterSpec(year_range=(1975, 1994)))
	assert titles(result) == ["Bravo", "Charlie", "Delta"]
	# Hotel has no year: kept without a range, dropped with one
	assert "Hotel" in titles(FilterEngine().apply(catalogue, FilterSpec()))
	assert "Hotel" not in titles(FilterEngine().apply(catalogue, FilterSpec(year_range=(1900, 2100))))


def test_search_is_case_insensitive_substring(catalogue):
	assert titles(FilterEngine().apply(catalogue, FilterSpec(search_text="  oT  "))) == ["Foxtrot", "Hotel"]
	assert FilterEngine().apply(catalogue, FilterSpec(search_text="zzz")) == []


def test_clauses_combine(catalogue):
	spec = FilterSpec(selected_genres=["Drama"], year_range=(1990, 1999), search_text="a")
	assert titles(FilterEngine().apply(catalogue, spec)) == ["Charlie", "Delta"]


def test_filter_is_idempotent(catalogue):
	engine = FilterEngine()
	for spec in [
		FilterSpec(),
		FilterSpec(selected_genres=["Drama", "Thriller"]),
		FilterSpec(year_range=(1960, 1999), search_text="o"),
	]:
		once = engine.apply(catalogue, spec)
		assert engine.apply(once, spec) == once


def test_adding_a_genre_never_shrinks_the_result(catalogue):
	engine = FilterEngine()
	selected = []
	previous = None
	for genre in ["Horror", "Comedy", "Drama", "Action"]:
		selected.append(genre)
		current = set(titles(engine.apply(catalogue, FilterSpec(selected_genres=selected))))
		if previous is not None:
			assert previous <= current
		previous = current


def test_narrowing_years_never_grows_the_result(catalogue):
	engine = FilterEngine()
	ranges = [(1950, 2030), (1960, 2010), (1970, 2000), (1994, 1994), (1995, 1995)]
	sizes = [len(engine.apply(catalogue, FilterSpec(year_range=r))) for r in ranges]
	assert sizes == sorted(sizes, reverse=True)


def test_empty_input_is_valid():
	assert FilterEngine().apply([], FilterSpec(selected_genres=["Drama"])) == []


def test_filter_spec_validation_and_clamping():
	with pytest.raises(ValidationError):
		FilterSpec(year_range=(2000, 1990))
	with pytest.raises(ValidationError):
		FilterSpec(result_count=0)

	spec = FilterSpec(year_range=(1900, 2100)).clamped((1960, 2025))
	assert spec.year_range == (1960, 2025)
	spec = FilterSpec(year_range=(2030, 2040)).clamped((1960, 2025))
	assert spec.year_range == (2025, 2025)
	assert FilterSpec().clamped((1960, 2025)).year_range is None
	assert FilterSpec(selected_genres=[" Drama ", ""]).selected_genres == frozenset({"Drama"})
