"""
Aggregation module.
Groups movies by year, decade or genre and computes count and average rating per group.
These buckets feed the trend chart and the genre treemap.
"""

from typing import Dict, List, Optional, Tuple

from loguru import logger

from .models import AggregationBucket, Granularity, Movie


OTHER_LABEL = 'Other'  # synthetic bucket for genres beyond top N
DEFAULT_TOP_N = 12  # genres shown individually in the treemap


class _Stats:
	"""Running count and rating sum for one group."""
	__slots__ = ('count', 'rating_sum', 'rated')

	def __init__(self):
		self.count = 0  # every movie in the group
		self.rating_sum = 0.0  # sum over movies with a valid rating
		self.rated = 0  # number of movies with a valid rating

	def add(self, movie: Movie):
		self.count += 1
		if movie.has_valid_rating:  # ratings <= 0 or missing are counted but not averaged
			self.rating_sum += movie.rating
			self.rated += 1

	@property
	def average(self) -> Optional[float]:
		return self.rating_sum / self.rated if self.rated else None


def aggregate_by_time(movies: List[Movie], granularity: Granularity = Granularity.DECADE) -> List[AggregationBucket]:
	"""
	Group movies by exact year or by decade (floor(year / 10) * 10).
	Movies without a valid year are skipped. Buckets come back sorted by key ascending.
	"""
	granularity = Granularity(granularity)
	groups: Dict[int, _Stats] = {}

	for movie in movies:
		if movie.year is None:
			continue
		key = (movie.year // 10) * 10 if granularity is Granularity.DECADE else movie.year
		groups.setdefault(key, _Stats()).add(movie)

	buckets = [
		AggregationBucket(
			key=key,
			label=f"{key}s" if granularity is Granularity.DECADE else str(key),
			count=stats.count,
			average_rating=stats.average,
		)
		for key, stats in sorted(groups.items())
	]
	logger.debug(f"[Aggregator] {granularity.value} buckets={len(buckets)} from {len(movies)} movies")
	return buckets


def genre_labels(movie: Movie) -> Tuple[str, ...]:
	"""Display genres, falling back to genre tokens when the display list is empty."""
	labels = movie.genres if movie.genres else movie.genre_tokens
	return tuple(label.strip() for label in labels if label and label.strip())


def aggregate_by_genre(
	movies: List[Movie],
	top_n: int = DEFAULT_TOP_N,
	year_range: Optional[Tuple[int, int]] = None,
) -> List[AggregationBucket]:
	"""
	Fan every movie out to each of its genre labels, then keep the `top_n` genres by count
	and collapse the remainder into one "Other" bucket.
	An optional inclusive year range restricts the movies first (trend chart drill-down).
	"""
	top_n = max(0, top_n)  # negative behaves like 0: everything goes to "Other"

	groups: Dict[str, _Stats] = {}  # insertion order = first appearance
	for movie in movies:
		if year_range is not None:
			if movie.year is None or not year_range[0] <= movie.year <= year_range[1]:
				continue
		for label in genre_labels(movie):
			groups.setdefault(label, _Stats()).add(movie)

	if not groups:
		logger.debug("[Aggregator] No genre data to aggregate")
		return []

	# Count descending; stable sort keeps first-appearance order among ties
	ranked = sorted(groups.items(), key=lambda item: item[1].count, reverse=True)
	top, rest = ranked[:top_n], ranked[top_n:]

	buckets = [
		AggregationBucket(key=name, label=name, count=stats.count, average_rating=stats.average)
		for name, stats in top
	]

	if rest:
		other_count = sum(stats.count for _, stats in rest)
		other_sum = sum(stats.rating_sum for _, stats in rest)
		other_rated = sum(stats.rated for _, stats in rest)
		if other_count > 0:
			buckets.append(AggregationBucket(
				key=OTHER_LABEL,
				label=OTHER_LABEL,
				count=other_count,
				average_rating=other_sum / other_rated if other_rated else None,
			))
		logger.debug(f"[Aggregator] Collapsed {len(rest)} genres into '{OTHER_LABEL}' ({other_count} entries)")

	logger.debug(f"[Aggregator] genre buckets={len(buckets)} from {len(movies)} movies")
	return buckets


def bucket_year_range(bucket: AggregationBucket, granularity: Granularity) -> Tuple[int, int]:
	"""Inclusive year span covered by a time bucket."""
	start = int(bucket.key)
	if Granularity(granularity) is Granularity.DECADE:
		return start, start + 9
	return start, start


def toggle_range(
	selected: Optional[Tuple[int, int]],
	clicked: Tuple[int, int],
) -> Optional[Tuple[int, int]]:
	"""Clicking the already-selected range clears it; any other range replaces it."""
	if selected is not None and tuple(selected) == tuple(clicked):
		return None
	return tuple(clicked)
