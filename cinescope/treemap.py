"""
Treemap tiling for the genre view.
Squarified layout: tile area is proportional to bucket count, and the result is
deterministic for a fixed bucket order (count descending).
"""

from dataclasses import dataclass
from typing import List, Sequence

from .models import AggregationBucket


@dataclass(frozen=True)
class TreemapTile:
	bucket: AggregationBucket
	x0: float
	y0: float
	x1: float
	y1: float

	@property
	def width(self) -> float:
		return self.x1 - self.x0

	@property
	def height(self) -> float:
		return self.y1 - self.y0


def _worst_ratio(row: Sequence[float], side: float) -> float:
	# Largest aspect ratio in a row laid along a side of length `side`
	total = sum(row)
	if total <= 0 or side <= 0:
		return float('inf')
	return max(max(side * side * a / (total * total), (total * total) / (side * side * a)) for a in row)


def squarify(
	buckets: List[AggregationBucket],
	width: float,
	height: float,
	padding: float = 0.0,
) -> List[TreemapTile]:
	"""
	Tile the rectangle (0, 0, width, height) with one tile per bucket of positive count.
	`padding` shrinks each tile on every side (inner spacing) without changing placement.
	"""
	items = [b for b in buckets if b.count > 0]
	if not items or width <= 0 or height <= 0:
		return []

	total = float(sum(b.count for b in items))
	scale = width * height / total
	areas = [b.count * scale for b in items]

	tiles: List[TreemapTile] = []
	x, y, w, h = 0.0, 0.0, float(width), float(height)
	i = 0
	while i < len(items):
		side = min(w, h)
		row = [areas[i]]
		j = i + 1
		# Grow the row while it makes the worst aspect ratio better
		while j < len(items) and _worst_ratio(row + [areas[j]], side) <= _worst_ratio(row, side):
			row.append(areas[j])
			j += 1

		row_total = sum(row)
		if w >= h:
			# Column along the left edge
			col_w = row_total / h if h else 0.0
			cy = y
			for k, area in enumerate(row):
				tile_h = area / col_w if col_w else 0.0
				tiles.append(_tile(items[i + k], x, cy, x + col_w, cy + tile_h, padding))
				cy += tile_h
			x, w = x + col_w, w - col_w
		else:
			# Row along the top edge
			row_h = row_total / w if w else 0.0
			cx = x
			for k, area in enumerate(row):
				tile_w = area / row_h if row_h else 0.0
				tiles.append(_tile(items[i + k], cx, y, cx + tile_w, y + row_h, padding))
				cx += tile_w
			y, h = y + row_h, h - row_h
		i = j

	return tiles


def _tile(bucket, x0, y0, x1, y1, padding) -> TreemapTile:
	half = padding / 2
	px = min(half, (x1 - x0) / 2)
	py = min(half, (y1 - y0) / 2)
	return TreemapTile(bucket=bucket, x0=x0 + px, y0=y0 + py, x1=x1 - px, y1=y1 - py)
