"""
Display helpers: genre colours, rating colours and the genre picker search.
These rules are for presentation only; filtering uses genre tokens (see filters.py).
"""

from typing import Iterable, List, Optional, Sequence, Union

from rapidfuzz import fuzz, process  # typo-tolerant genre picker search

from loguru import logger


GENRE_COLORS = {
	'Action': '#e63946', 'Adventure': '#48cae4', 'Animation': '#ffafcc', 'Anime': '#ffc8dd',
	'B-Action': '#9d4edd', 'B-Horror': '#720026', 'Baseball': '#5c677d', 'Basketball': '#6b705c',
	'Biography': '#3a5a40', 'Boxing': '#bc4749', 'Caper': '#f77f00', 'Comedy': '#ffb703',
	'Coming-of-Age': '#02c39a', 'Concert': '#7f5539', 'Crime': '#6d6875', 'Cyberpunk': '#7209b7',
	'Disaster': '#0077b6', 'Docudrama': '#4361ee', 'Documentary': '#4cc9f0', 'Drama': '#2a9d8f',
	'Epic': '#2f3e46', 'Family': '#ffddd2', 'Fantasy': '#bde0fe', 'Farce': '#ffb4a2',
	'Football': '#1d3557', 'Gangster': '#5c3d2e', 'Giallo': '#fcbf49', 'Heist': '#9d0208',
	'History': '#8d99ae', 'Holiday': '#0081a7', 'Horror': '#1d1e33', 'Isekai': '#cdb4db',
	'Iyashikei': '#a2d2ff', 'Josei': '#ffcfd2', 'Kaiju': '#6a040f', 'Mecha': '#4d194d',
	'Mockumentary': '#a78bfa', 'Motorsport': '#ef233c', 'Music': '#90e0ef', 'Musical': '#219ebc',
	'Mystery': '#023047', 'News': '#adb5bd', 'Parody': '#f7b801', 'Quest': '#8ac926',
	'Romance': '#ff6b6b', 'Samurai': '#5e548e', 'Satire': '#e5989b', 'Sci-Fi': '#4cc9f0',
	'Seinen': '#9e2a2b', 'Shōjo': '#ffb3c1', 'Shōnen': '#80ffdb', 'Slapstick': '#ffd166',
	'Soccer': '#007f5f', 'Sport': '#40916c', 'Spy': '#6a4c93', 'Stand-Up': '#ff4d6d',
	'Steampunk': '#6d597a', 'Superhero': '#e71d36', 'Survival': '#335c67', 'Swashbuckler': '#b08968',
	'Thriller': '#8d0801', 'Tragedy': '#6c757d', 'War': '#495057', 'Western': '#cc8b3c',
	'Whodunnit': '#4b3f72', 'Wuxia': '#b5179e',
}
DEFAULT_GENRE_COLOR = '#8ecae6'

# Genres offered in the sidebar picker
ALL_GENRES = list(GENRE_COLORS)

# Average rating -> colour, quantized over [5, 9]
RATING_COLOR_DOMAIN = (5.0, 9.0)
RATING_COLORS = ('#2b2b2b', '#33415c', '#335c67', '#008b8b', '#f4d35e')
NO_RATING_COLOR = '#333333'


def genre_color(labels: Union[str, Sequence[str], None]) -> str:
	"""
	Colour for a bubble, matched case-insensitively per label in order:
	an exact palette key, else a key contained in the label ("Prison Drama" -> Drama),
	else a key containing the label ("sci" -> Sci-Fi).
	"""
	if not labels:
		return DEFAULT_GENRE_COLOR
	if isinstance(labels, str):
		labels = [labels]
	keys = [(key.lower(), color) for key, color in GENRE_COLORS.items()]
	for label in labels:
		needle = label.strip().lower()
		if not needle:
			continue
		for matches in (
			lambda k: k == needle,
			lambda k: k in needle,
			lambda k: needle in k,
		):
			for k, color in keys:
				if matches(k):
					return color
	return DEFAULT_GENRE_COLOR


def rating_color(average_rating: Optional[float]) -> str:
	"""Quantize an average rating into one of five colours; no rating gets a neutral grey."""
	if average_rating is None or average_rating <= 0:
		return NO_RATING_COLOR
	lo, hi = RATING_COLOR_DOMAIN
	n = len(RATING_COLORS)
	index = int((average_rating - lo) / (hi - lo) * n)
	return RATING_COLORS[min(n - 1, max(0, index))]


def search_genres(query: str, genres: Iterable[str] = ALL_GENRES, min_score: int = 80) -> List[str]:
	"""
	Narrow the genre picker list. Plain substring matching first; when that finds
	nothing, fall back to fuzzy matching so small typos ("thriler") still hit.
	"""
	genres = list(genres)
	q = (query or '').strip().lower()
	if not q:
		return genres
	hits = [g for g in genres if q in g.lower()]
	if hits:
		return hits
	matches = process.extract(q, genres, scorer=fuzz.WRatio, processor=str.lower, limit=None, score_cutoff=min_score)
	fuzzy = {match for match, _, _ in matches}
	logger.debug(f"[Palette] Fuzzy genre search '{q}' -> {sorted(fuzzy)}")
	return [g for g in genres if g in fuzzy]  # keep picker order

