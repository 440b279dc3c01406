"""
Tests for display colours and the genre picker search.
"""

from cinescope.palette import (
	ALL_GENRES,
	DEFAULT_GENRE_COLOR,
	GENRE_COLORS,
	NO_RATING_COLOR,
	RATING_COLORS,
	genre_color,
	rating_color,
	search_genres,
)


def test_genre_color_substring_either_direction():
	assert genre_color(["Drama"]) == GENRE_COLORS["Drama"]
	# Label contains a palette key
	assert genre_color(["Prison Drama"]) == GENRE_COLORS["Drama"]
	# Palette key contains the label
	assert genre_color(["sci"]) == GENRE_COLORS["Sci-Fi"]
	# First label with a hit wins
	assert genre_color(["Unknownish", "Western"]) == GENRE_COLORS["Western"]


def test_genre_color_defaults():
	assert genre_color([]) == DEFAULT_GENRE_COLOR
	assert genre_color(None) == DEFAULT_GENRE_COLOR
	assert genre_color(["Zzz"]) == DEFAULT_GENRE_COLOR
	assert genre_color("Horror") == GENRE_COLORS["Horror"]


def test_rating_color_quantizes():
	assert rating_color(None) == NO_RATING_COLOR
	assert rating_color(0) == NO_RATING_COLOR
	assert rating_color(3.0) == RATING_COLORS[0]
	assert rating_color(5.9) == RATING_COLORS[1]
	assert rating_color(7.0) == RATING_COLORS[2]
	assert rating_color(8.0) == RATING_COLORS[3]
	assert rating_color(9.5) == RATING_COLORS[4]


def test_search_genres_substring_then_fuzzy():
	assert search_genres("") == ALL_GENRES
	assert search_genres("dra") == ["Docudrama", "Drama"]
	assert search_genres("thriler") == ["Thriller"]
	assert search_genres("qqqqqq") == []
