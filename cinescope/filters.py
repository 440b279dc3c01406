"""
Filter module.
Applies the sidebar's genre, year and title-search constraints to the movie collection.
"""

from typing import Iterable, List, Optional, Tuple

from loguru import logger

from .models import FilterSpec, Movie


def matches_genre_filter(movie: Movie, selected_genres: Iterable[str]) -> bool:
	"""
	ANY-match of the movie's genre tokens against the selected set.
	An empty selection matches everything; a movie without tokens never matches a non-empty selection.
	"""
	selected = set(selected_genres)
	if not selected:
		return True
	return any(token in selected for token in movie.genre_tokens)


def matches_year_range(movie: Movie, year_range: Optional[Tuple[int, int]]) -> bool:
	"""Inclusive year check; movies without a valid year fail once a range is set."""
	if year_range is None:
		return True
	if movie.year is None:
		return False
	start, end = year_range
	return start <= movie.year <= end


def matches_search(movie: Movie, search_text: str) -> bool:
	"""Case-insensitive substring match over the title."""
	if not search_text:
		return True
	return search_text.lower() in (movie.title or '').lower()


class FilterEngine:
	"""
	Produces the subset of movies matching a FilterSpec.
	Pure and order-preserving: the output keeps the input's relative order.
	"""

	def apply(self, movies: List[Movie], spec: FilterSpec) -> List[Movie]:
		result = list(movies)

		# Genres: movie must include AT LEAST ONE requested genre token
		if spec.selected_genres:
			result = [m for m in result if matches_genre_filter(m, spec.selected_genres)]
			logger.debug(f"[Filter] Genre clause any_of={sorted(spec.selected_genres)[:5]} kept {len(result)}")

		# Year range: inclusive, unparsable years are dropped
		if spec.year_range is not None:
			result = [m for m in result if matches_year_range(m, spec.year_range)]
			logger.debug(f"[Filter] Year clause {spec.year_range[0]}-{spec.year_range[1]} kept {len(result)}")

		# Title search
		if spec.search_text:
			result = [m for m in result if matches_search(m, spec.search_text)]
			logger.debug(f"[Filter] Search clause '{spec.search_text}' kept {len(result)}")

		logger.info(f"[Filter] {len(result)} of {len(movies)} movies match")
		return result
