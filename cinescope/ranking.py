"""
Ranking module.
Chooses the bounded display list from a filtered subset: a random sample or the top-ranked movies.
"""

import random
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from .models import DisplayMode, Movie


class Ranker:
	"""
	Selection strategy for the bubble view:
	- RANDOM: uniform shuffle of the candidates, first `count`
	- TOP without genres: rating descending
	- TOP with genres: genre match score descending, then rating descending
	Ties keep the candidates' original order (Python's sort is stable).
	"""

	def __init__(self, pool_cap: Optional[int] = None):
		# Optional cap on how many filtered movies are considered at all
		if pool_cap is not None and pool_cap <= 0:
			raise ValueError(f"pool_cap must be positive, got {pool_cap}")
		self.pool_cap = pool_cap

	def select(
		self,
		movies: List[Movie],
		mode: DisplayMode,
		count: int,
		selected_genres: Iterable[str] = (),
		rng: Optional[random.Random] = None,
	) -> List[Movie]:
		"""Return at most `count` movies ordered for display."""
		if count <= 0 or not movies:
			return []

		pool = list(movies[:self.pool_cap]) if self.pool_cap else list(movies)
		mode = DisplayMode(mode)

		if mode is DisplayMode.RANDOM:
			rng = rng or random.Random()
			rng.shuffle(pool)  # Fisher-Yates, every permutation equally likely
			chosen = pool[:count]
		else:
			selected = frozenset(selected_genres)
			pool.sort(key=lambda m: self._sort_key(m, selected), reverse=True)
			chosen = pool[:count]

		logger.debug(f"[Ranker] mode={mode.value} pool={len(pool)} returned={len(chosen)}")
		return chosen

	def _sort_key(self, movie: Movie, selected: frozenset) -> Tuple[int, float]:
		# Without selected genres every score is 0, so only rating orders the pool
		return (self.match_score(movie, selected), movie.rating_or_zero)

	@staticmethod
	def match_score(movie: Movie, selected_genres: Iterable[str]) -> int:
		"""Number of the movie's genre tokens that are in the selected set."""
		selected = set(selected_genres)
		if not selected:
			return 0
		return sum(1 for token in movie.genre_tokens if token in selected)
