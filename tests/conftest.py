"""
Shared fixtures for the CineScope tests.
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from cinescope.models import Movie


def make_movie(title, year=None, rating=None, genres=(), genre_tokens=None, **extra):
	"""Build a Movie with tokens defaulting to the display genres."""
	return Movie(
		title=title,
		year=year,
		rating=rating,
		genres=tuple(genres),
		genre_tokens=tuple(genres if genre_tokens is None else genre_tokens),
		**extra,
	)


@pytest.fixture
def three_movies():
	# Example dataset: two 1994 movies and one from 2001
	return [
		make_movie("Movie One", year=1994, rating=8.9, genres=["Drama"]),
		make_movie("Movie Two", year=1994, rating=7.2, genres=["Comedy"]),
		make_movie("Movie Three", year=2001, rating=6.0, genres=["Drama"]),
	]


@pytest.fixture
def catalogue():
	return [
		make_movie("Alpha", year=1962, rating=8.3, genres=["Adventure", "Drama", "War"]),
		make_movie("Bravo", year=1975, rating=8.1, genres=["Adventure", "Thriller"]),
		make_movie("Charlie", year=1994, rating=9.3, genres=["Drama"]),
		make_movie("Delta", year=1994, rating=8.9, genres=["Comedy", "Crime", "Drama"]),
		make_movie("Echo", year=1999, rating=8.7, genres=["Action", "Sci-Fi"]),
		make_movie("Foxtrot", year=2007, rating=7.6, genres=["Comedy"]),
		make_movie("Golf", year=2017, rating=None, genres=["Horror", "Mystery", "Thriller"]),
		make_movie("Hotel", year=None, rating=6.5, genres=["Drama"]),
		make_movie("India", year=2011, rating=0.0, genres=[]),
	]
