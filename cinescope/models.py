"""
Data models for the CineScope dashboard.
Defines the core data structures passed between loader, filters, ranking, aggregation and layout.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Enum for the small closed sets of modes the UI can pick from
from enum import Enum  # display mode / time granularity
# Import typing helpers for precise and self-documenting types
from typing import FrozenSet, Optional, Tuple  # tuples, sets, and optional values

# Pydantic validates user-chosen filter values at the UI boundary
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


@dataclass(frozen=True)
class Movie:
	"""
	Represents a single movie record from the static dataset.
	Records are created once by the loader and never mutated afterwards.
	"""
	title: str  # display title as written in the dataset
	duration: str = ''  # running time in "Xh Ym" form, kept as text
	rating: Optional[float] = None  # 0-10 rating, None when missing or malformed
	description: str = ''  # short synopsis
	link: str = ''  # IMDb (or similar) URL, may be empty
	writers: Tuple[str, ...] = ()  # ordered writer names
	directors: Tuple[str, ...] = ()  # ordered director names
	stars: Tuple[str, ...] = ()  # ordered lead actors
	countries_of_origin: Tuple[str, ...] = ()  # ordered country names
	production_companies: Tuple[str, ...] = ()  # ordered studio names
	genres: Tuple[str, ...] = ()  # human-readable genre labels (display)
	genre_tokens: Tuple[str, ...] = ()  # normalized genre keys (filter matching)
	release_date: str = ''  # release date as written in the dataset
	year: Optional[int] = None  # release year, None when unparsable
	month: Optional[int] = None  # release month, None when unparsable
	day: Optional[int] = None  # release day, None when unparsable

	@property
	def rating_or_zero(self) -> float:
		"""Rating used for ordering: a missing rating sorts as 0."""
		return self.rating if self.rating is not None else 0.0

	@property
	def has_valid_rating(self) -> bool:
		"""True when the rating may take part in averages (strictly positive)."""
		return self.rating is not None and self.rating > 0


class DisplayMode(str, Enum):
	"""How the selection strategy picks the bounded display list."""
	RANDOM = 'random'
	TOP = 'top'


class Granularity(str, Enum):
	"""Time bucket size for trend aggregation."""
	YEAR = 'year'
	DECADE = 'decade'


class FilterSpec(BaseModel):
	"""
	User-chosen constraints from the sidebar.
	An empty genre set, a None year range and an empty search are all no-ops.
	"""
	model_config = ConfigDict(frozen=True)

	selected_genres: FrozenSet[str] = frozenset()
	year_range: Optional[Tuple[int, int]] = None
	search_text: str = ''
	result_count: int = Field(default=25, gt=0)

	@field_validator('selected_genres', mode='before')
	@classmethod
	def _strip_genres(cls, value):
		if value is None:
			return frozenset()
		return frozenset(str(g).strip() for g in value if str(g).strip())

	@field_validator('search_text', mode='before')
	@classmethod
	def _strip_search(cls, value):
		return (value or '').strip()

	@model_validator(mode='after')
	def _check_year_order(self):
		if self.year_range is not None and self.year_range[0] > self.year_range[1]:
			raise ValueError(f"year_range min must not exceed max: {self.year_range}")
		return self

	def clamped(self, domain: Tuple[int, int]) -> 'FilterSpec':
		"""Return a copy whose year range lies inside the dataset's year domain."""
		if self.year_range is None:
			return self
		lo, hi = domain
		start = min(max(self.year_range[0], lo), hi)
		end = min(max(self.year_range[1], lo), hi)
		return self.model_copy(update={'year_range': (start, max(start, end))})


@dataclass(frozen=True)
class AggregationBucket:
	"""One aggregation group (a year, decade or genre) with its derived statistics."""
	key: object  # int year/decade start, or genre label
	label: str  # display label ("1994", "1990s", "Drama", "Other")
	count: int  # number of movies (fan-out count for genres)
	average_rating: Optional[float]  # mean of valid ratings, None when none were valid


@dataclass
class LayoutNode:
	"""
	A movie augmented with simulation state.
	Owned by exactly one ForceSimulation run and discarded when it ends.
	"""
	id: str  # identity used to key positions (defaults to the title)
	radius: float  # collision radius in layout units
	x: float = 0.0
	y: float = 0.0
	vx: float = 0.0
	vy: float = 0.0
	movie: Optional[Movie] = field(default=None, repr=False)  # source record, if any
