"""
Data loading and preprocessing module.
Handles loading movies from the static CSV and normalizing list/number cells into typed fields.
"""

# Standard libs for regex, math checks, typing, and paths
import math  # finite-number checks
import re  # strip list punctuation
from typing import Dict, List, Optional, Tuple  # type hints
from pathlib import Path  # filesystem-safe paths

# pandas reads the delimited table; every cell is kept as text and typed below
import pandas as pd  # CSV reader

# Import our Movie data class used across the project
from .models import Movie  # structured movie record

# Console logging
from loguru import logger  # console logger


# Columns of the source table, in file order
COLUMNS = (
	'title', 'duration', 'rating', 'description', 'movie_link',
	'writers', 'directors', 'stars', 'countries_origin', 'production_companies',
	'genres', 'genre_token', 'release_date', 'year', 'month', 'day',
)

# Year span used when the dataset has no valid year at all
DEFAULT_YEAR_DOMAIN = (1960, 2025)


class DataLoader:
	"""
	Handles loading and preprocessing of movie data.
	"""

	# Brackets and quotes wrapping serialized list cells like "['Drama', 'Action']"
	LIST_PUNCTUATION = re.compile(r"[\[\]'\"]+")

	def load_movies_from_csv(self, filepath: str) -> List[Movie]:
		"""
		Load movies from a CSV file with one movie per row.
		Returns a list of Movie objects; malformed rows are skipped with a warning.
		"""
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Movie data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading movies from {filepath}...")  # log action

		# Read everything as text so we decide how to treat malformed numbers ourselves
		frame = pd.read_csv(filepath, dtype=str, keep_default_na=False, encoding='utf-8')
		missing = [c for c in COLUMNS if c not in frame.columns]
		if missing:
			logger.warning(f"[DataLoader] Missing columns {missing}; treating them as empty")

		movies = []  # accumulator for parsed Movie objects
		for row_num, row in enumerate(frame.to_dict(orient='records'), 2):  # header is line 1
			try:
				movies.append(self._parse_movie_data(row))  # convert dict -> Movie
			except (TypeError, ValueError) as e:
				logger.warning(f"[DataLoader] Skipping malformed row at line {row_num}: {e}")  # bad row
				continue  # move on

		logger.info(f"[DataLoader] Successfully loaded {len(movies)} movies.")  # summary
		return movies  # return list

	def _parse_movie_data(self, data: Dict) -> Movie:
		"""
		Convert a raw row dictionary into a strongly-typed Movie object.
		Malformed numeric cells degrade to None instead of failing the record.
		"""
		title = self._clean_text(data.get('title'))  # display title
		if not title:
			logger.warning("[DataLoader] Row has no title; keeping it with an empty title")

		return Movie(
			title=title,
			duration=self._clean_text(data.get('duration')),
			rating=self._parse_rating(data.get('rating'), title),
			description=self._clean_text(data.get('description')),
			link=self._clean_text(data.get('movie_link')),
			writers=self.parse_list(data.get('writers')),
			directors=self.parse_list(data.get('directors')),
			stars=self.parse_list(data.get('stars')),
			countries_of_origin=self.parse_list(data.get('countries_origin')),
			production_companies=self.parse_list(data.get('production_companies')),
			genres=self.parse_list(data.get('genres')),
			genre_tokens=self.parse_list(data.get('genre_token')),
			release_date=self._clean_text(data.get('release_date')),
			year=self.parse_int(data.get('year')),
			month=self.parse_int(data.get('month')),
			day=self.parse_int(data.get('day')),
		)

	@classmethod
	def parse_list(cls, value) -> Tuple[str, ...]:
		"""
		Turn a serialized list cell such as "['Drama', 'Action']" into ('Drama', 'Action').
		Brackets and quotes are stripped, items trimmed, empty items dropped.
		"""
		if value is None:  # missing field
			return ()
		if isinstance(value, (list, tuple)):  # already a sequence
			return tuple(str(item).strip() for item in value if str(item).strip())
		cleaned = cls.LIST_PUNCTUATION.sub('', str(value))  # drop [ ] ' "
		return tuple(item.strip() for item in cleaned.split(',') if item.strip())  # split/trim

	@staticmethod
	def parse_int(value) -> Optional[int]:
		"""Parse a small integer cell ("1994", "1994.0"); None when it is not a whole number."""
		text = str(value).strip() if value is not None else ''
		if not text:
			return None
		try:
			return int(text)
		except ValueError:
			pass
		try:
			number = float(text)
		except ValueError:
			return None
		if not math.isfinite(number) or not number.is_integer():
			return None
		return int(number)

	def _parse_rating(self, value, title: str) -> Optional[float]:
		"""Parse a 0-10 rating; out-of-range or non-numeric values become None."""
		text = str(value).strip() if value is not None else ''
		if not text:
			return None
		try:
			rating = float(text)
		except ValueError:
			logger.warning(f"[DataLoader] Non-numeric rating '{text}' for '{title}'; treating as missing")
			return None
		if not math.isfinite(rating) or not 0.0 <= rating <= 10.0:
			logger.warning(f"[DataLoader] Rating {text} for '{title}' outside 0-10; treating as missing")
			return None
		return rating

	def _clean_text(self, text) -> str:
		"""Trim whitespace; handle None safely by returning empty string."""
		if text is None:  # None
			return ''
		return str(text).strip()

	def get_all_genre_tokens(self, movies: List[Movie]) -> List[str]:
		"""Return a sorted list of all unique genre tokens (filter keys) in the dataset."""
		tokens = set()
		for movie in movies:
			tokens.update(movie.genre_tokens)
		return sorted(tokens)

	def year_domain(self, movies: List[Movie]) -> Tuple[int, int]:
		"""Return (min_year, max_year) over movies with a valid year, or the default span."""
		years = [m.year for m in movies if m.year is not None]
		if not years:
			return DEFAULT_YEAR_DOMAIN
		return min(years), max(years)
