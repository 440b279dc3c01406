"""
Pipeline module.
The boundary the dashboard talks to: load, filter, select, aggregate and lay out.
Loader -> filters -> selection -> (aggregation | layout). Every step returns a value;
missing data and empty results come back as empty lists instead of exceptions.
"""

import os
import random
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from loguru import logger

from . import aggregation
from .aggregation import DEFAULT_TOP_N
from .data_loader import DataLoader
from .filters import FilterEngine
from .layout import Bounds, Positions
from .layout import layout as _layout
from .models import AggregationBucket, DisplayMode, FilterSpec, Granularity, Movie
from .ranking import Ranker


# Bundled sample dataset; CINESCOPE_DATA points somewhere else
DEFAULT_DATA_PATH = Path(__file__).resolve().parents[1] / 'data' / 'movies.csv'
DEFAULT_RESULT_COUNT = 25


def load_movies(path: Optional[str] = None) -> List[Movie]:
	"""Load the dataset once. A failed load is logged and yields an empty collection."""
	path = path or os.environ.get('CINESCOPE_DATA') or str(DEFAULT_DATA_PATH)
	try:
		return DataLoader().load_movies_from_csv(path)
	except (OSError, ValueError, UnicodeDecodeError) as e:
		logger.error(f"[Pipeline] Could not load movies from {path}: {e}")
		return []


def filter_movies(movies: List[Movie], spec: FilterSpec) -> List[Movie]:
	return FilterEngine().apply(movies, spec)


def select_movies(
	movies: List[Movie],
	mode: DisplayMode,
	count: int = DEFAULT_RESULT_COUNT,
	selected_genres=(),
	seed: Optional[int] = None,
	pool_cap: Optional[int] = None,
) -> List[Movie]:
	"""Bounded display list; `seed` makes RANDOM reproducible."""
	rng = random.Random(seed) if seed is not None else None
	return Ranker(pool_cap=pool_cap).select(movies, mode, count, selected_genres=selected_genres, rng=rng)


def aggregate_by_time(movies: List[Movie], granularity: Granularity = Granularity.DECADE) -> List[AggregationBucket]:
	return aggregation.aggregate_by_time(movies, granularity)


def aggregate_by_genre(
	movies: List[Movie],
	top_n: int = DEFAULT_TOP_N,
	year_range: Optional[Tuple[int, int]] = None,
) -> List[AggregationBucket]:
	return aggregation.aggregate_by_genre(movies, top_n=top_n, year_range=year_range)


def layout(movies: List[Movie], bounds: Tuple[float, float], **params) -> Positions:
	return _layout(movies, Bounds(*bounds), **params)


def recompute(
	movies: List[Movie],
	spec: FilterSpec,
	mode: DisplayMode,
	seed: Optional[int] = None,
	pool_cap: Optional[int] = None,
) -> List[Movie]:
	"""Filter then select. Pure for a given seed; call it on every state change."""
	filtered = filter_movies(movies, spec)
	return select_movies(
		filtered,
		mode,
		count=spec.result_count,
		selected_genres=spec.selected_genres,
		seed=seed,
		pool_cap=pool_cap,
	)


def describe_movie(movie: Movie) -> Dict[str, str]:
	"""Flatten a movie into display strings for the detail panel."""
	return {
		'title': movie.title,
		'year': str(movie.year) if movie.year is not None else '',
		'rating': f"{movie.rating:.1f}" if movie.rating is not None else 'N/A',
		'duration': movie.duration,
		'genres': ', '.join(movie.genres),
		'directors': ', '.join(movie.directors),
		'writers': ', '.join(movie.writers),
		'stars': ', '.join(movie.stars),
		'countries': ', '.join(movie.countries_of_origin),
		'companies': ', '.join(movie.production_companies),
		'release_date': movie.release_date,
		'description': movie.description,
		'link': movie.link,
	}


class DashboardState:
	"""
	Single owner of the view state: the movie collection, the current filters and mode,
	and the random seed. The display list is recomputed only when those inputs change;
	RANDOM mode reshuffles only on an explicit refresh().
	"""

	def __init__(
		self,
		movies: List[Movie],
		spec: Optional[FilterSpec] = None,
		mode: DisplayMode = DisplayMode.RANDOM,
		pool_cap: Optional[int] = None,
		rng: Optional[random.Random] = None,
	):
		self.movies = movies
		self.spec = spec or FilterSpec()
		self.mode = DisplayMode(mode)
		self.pool_cap = pool_cap
		self._rng = rng or random.Random()
		self.seed = self._rng.randrange(2 ** 32)
		self._cache_key = None
		self._display: List[Movie] = []

	def update(self, spec: Optional[FilterSpec] = None, mode: Optional[DisplayMode] = None):
		"""Replace the filters and/or mode."""
		if spec is not None:
			self.spec = spec
		if mode is not None:
			self.mode = DisplayMode(mode)

	def refresh(self) -> List[Movie]:
		"""Draw a new random sample (user pressed Refresh)."""
		self.seed = self._rng.randrange(2 ** 32)
		logger.info(f"[Pipeline] Refresh requested; new seed {self.seed}")
		return self.display_list()

	def display_list(self) -> List[Movie]:
		key = (self.spec, self.mode, self.seed)
		if key != self._cache_key:
			self._display = recompute(self.movies, self.spec, self.mode, seed=self.seed, pool_cap=self.pool_cap)
			self._cache_key = key
		return list(self._display)
