"""
Tests for the selection strategy: random sampling and top ranking.
"""

import random
from collections import Counter

import pytest

from conftest import make_movie
from cinescope.models import DisplayMode
from cinescope.ranking import Ranker


def titles(movies):
	return [m.title for m in movies]


def test_top_without_genres_sorts_by_rating(catalogue):
	result = Ranker().select(catalogue, DisplayMode.TOP, count=len(catalogue))
	ratings = [m.rating_or_zero for m in result]
	assert all(a >= b for a, b in zip(ratings, ratings[1:]))
	# Missing rating ranks like 0 and ties keep input order
	assert titles(result)[-2:] == ["Golf", "India"]


def test_top_with_one_genre_ranks_matches_first(catalogue):
	result = Ranker().select(catalogue, DisplayMode.TOP, count=len(catalogue), selected_genres=["Thriller"])
	has_genre = ["Thriller" in m.genre_tokens for m in result]
	# All matching movies come before all non-matching ones, whatever the rating
	assert has_genre == sorted(has_genre, reverse=True)
	assert titles(result)[:2] == ["Bravo", "Golf"]


def test_top_prefers_more_matching_genres_before_rating():
	low_double = make_movie("Double", rating=5.0, genres=["Drama", "Crime"])
	high_single = make_movie("Single", rating=9.5, genres=["Drama"])
	result = Ranker().select([high_single, low_double], DisplayMode.TOP, count=2, selected_genres=["Drama", "Crime"])
	assert titles(result) == ["Double", "Single"]


def test_top_drama_example(three_movies):
	result = Ranker().select(three_movies, DisplayMode.TOP, count=2, selected_genres=["Drama"])
	assert titles(result) == ["Movie One", "Movie Three"]


def test_top_is_idempotent(catalogue):
	ranker = Ranker()
	first = ranker.select(catalogue, DisplayMode.TOP, count=5, selected_genres=["Drama"])
	second = ranker.select(catalogue, DisplayMode.TOP, count=5, selected_genres=["Drama"])
	assert first == second


def test_select_does_not_mutate_input(catalogue):
	before = list(catalogue)
	Ranker().select(catalogue, DisplayMode.RANDOM, count=3, rng=random.Random(1))
	Ranker().select(catalogue, DisplayMode.TOP, count=3)
	assert catalogue == before


def test_count_bounds(catalogue):
	assert len(Ranker().select(catalogue, DisplayMode.RANDOM, count=4, rng=random.Random(0))) == 4
	assert len(Ranker().select(catalogue, DisplayMode.TOP, count=100)) == len(catalogue)
	assert Ranker().select(catalogue, DisplayMode.TOP, count=0) == []
	assert Ranker().select([], DisplayMode.RANDOM, count=5) == []


def test_random_is_reproducible_with_a_seed(catalogue):
	a = Ranker().select(catalogue, DisplayMode.RANDOM, count=5, rng=random.Random(42))
	b = Ranker().select(catalogue, DisplayMode.RANDOM, count=5, rng=random.Random(42))
	assert a == b
	assert len(set(titles(a))) == 5


def test_random_sampling_is_roughly_uniform():
	movies = [make_movie(f"M{i}", rating=float(i % 10)) for i in range(10)]
	rng = random.Random(1234)
	trials = 6000
	hits = Counter()
	for _ in range(trials):
		for movie in Ranker().select(movies, DisplayMode.RANDOM, count=3, rng=rng):
			hits[movie.title] += 1
	expected = trials * 3 / len(movies)  # 1800 per movie
	for title in titles(movies):
		assert abs(hits[title] - expected) < expected * 0.1
	# No bias toward the head of the input
	assert abs(hits["M0"] - hits["M9"]) < expected * 0.15


def test_pool_cap_limits_candidates(catalogue):
	result = Ranker(pool_cap=3).select(catalogue, DisplayMode.TOP, count=10)
	assert set(titles(result)) == {"Alpha", "Bravo", "Charlie"}
	with pytest.raises(ValueError):
		Ranker(pool_cap=0)


def test_match_score():
	movie = make_movie("Mix", genres=["Action", "Drama", "Crime"])
	assert Ranker.match_score(movie, {"Drama", "Crime", "War"}) == 2
	assert Ranker.match_score(movie, set()) == 0
