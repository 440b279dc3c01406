"""
Tests for the squarified treemap tiling.
"""

import pytest

from cinescope.models import AggregationBucket
from cinescope.treemap import squarify


def bucket(label, count, avg=7.0):
	return AggregationBucket(key=label, label=label, count=count, average_rating=avg)


BUCKETS = [bucket("Drama", 40), bucket("Comedy", 25), bucket("Action", 15), bucket("Horror", 12), bucket("Other", 8)]


def test_area_is_proportional_to_count():
	tiles = squarify(BUCKETS, 520, 320)
	assert [t.bucket.label for t in tiles] == [b.label for b in BUCKETS]
	total = sum(b.count for b in BUCKETS)
	for tile in tiles:
		assert tile.width * tile.height == pytest.approx(520 * 320 * tile.bucket.count / total)


def test_tiles_stay_inside_and_cover_the_rectangle():
	tiles = squarify(BUCKETS, 520, 320)
	for tile in tiles:
		assert -1e-9 <= tile.x0 <= tile.x1 <= 520 + 1e-9
		assert -1e-9 <= tile.y0 <= tile.y1 <= 320 + 1e-9
	assert sum(t.width * t.height for t in tiles) == pytest.approx(520 * 320)


def test_deterministic_for_fixed_order():
	assert squarify(BUCKETS, 400, 300) == squarify(BUCKETS, 400, 300)


def test_padding_shrinks_tiles():
	plain = squarify(BUCKETS, 520, 320)
	padded = squarify(BUCKETS, 520, 320, padding=3)
	for a, b in zip(plain, padded):
		assert b.x0 == pytest.approx(a.x0 + 1.5)
		assert b.x1 == pytest.approx(a.x1 - 1.5)


def test_empty_inputs():
	assert squarify([], 520, 320) == []
	assert squarify([bucket("Zero", 0)], 520, 320) == []
	assert squarify(BUCKETS, 0, 320) == []
