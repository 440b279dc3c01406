"""
Force layout module.
Computes non-overlapping bubble positions for the displayed movies with a small
force simulation: pairwise repulsion, a weak pull toward the centre, and collision
resolution, integrated with damped velocities until the energy (alpha) cools down.
"""

# Standard libs for math constants and type hints
import math  # golden angle for the initial spiral
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple  # type hints

# NumPy holds positions/velocities so the pairwise forces are vectorized
import numpy as np  # numeric arrays

# Project models
from .models import LayoutNode, Movie  # simulation node / source record

# Console logging
from loguru import logger  # console logger


# Radius range as a fraction of the layout width
DEFAULT_RADIUS_RANGE = (0.015, 0.06)
# Hard ceiling on any radius, as a fraction of the layout width
MAX_RADIUS_FRACTION = 0.1

# Initial spiral placement (same shape d3 uses for nodes without a position)
INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

Positions = Dict[str, Tuple[float, float]]


class Bounds(NamedTuple):
	width: float
	height: float

	@property
	def center(self) -> Tuple[float, float]:
		return self.width / 2, self.height / 2


def rating_value(movie: Movie) -> float:
	"""Rating used for sizing: a missing or zero rating counts as 1."""
	return movie.rating if movie.rating else 1.0


class RadiusScale:
	"""
	Linear map from the rating extent onto [lo, hi] x width.
	Monotone non-decreasing, always positive, never above MAX_RADIUS_FRACTION x width.
	"""

	def __init__(self, values: Iterable[float], width: float, radius_range: Tuple[float, float] = DEFAULT_RADIUS_RANGE):
		lo, hi = radius_range
		if not 0 < lo <= hi <= MAX_RADIUS_FRACTION:
			raise ValueError(f"radius_range must satisfy 0 < lo <= hi <= {MAX_RADIUS_FRACTION}, got {radius_range}")
		values = list(values)
		self.domain = (min(values), max(values)) if values else (0.0, 1.0)
		self.range = (lo * width, hi * width)

	def __call__(self, value: float) -> float:
		d0, d1 = self.domain
		r0, r1 = self.range
		if d1 <= d0:  # one distinct rating: everything gets the middle size
			return (r0 + r1) / 2
		t = (value - d0) / (d1 - d0)
		t = min(1.0, max(0.0, t))
		return r0 + t * (r1 - r0)


def node_ids(movies: List[Movie]) -> List[str]:
	"""Stable identities for the movies; repeated titles get a numeric suffix."""
	ids = []
	seen: Dict[str, int] = {}
	for movie in movies:
		base = f"{movie.title} ({movie.year})" if movie.year is not None else movie.title
		seen[base] = seen.get(base, 0) + 1
		ids.append(base if seen[base] == 1 else f"{base} #{seen[base]}")
	return ids


def build_nodes(
	movies: List[Movie],
	bounds: Bounds,
	radius_range: Tuple[float, float] = DEFAULT_RADIUS_RANGE,
	previous: Optional[Positions] = None,
) -> List[LayoutNode]:
	"""
	Create layout nodes sized by rating. Nodes whose id appears in `previous` start from
	that position; the others start on a spiral around the centre.
	"""
	scale = RadiusScale([rating_value(m) for m in movies], bounds.width, radius_range)
	cx, cy = bounds.center
	previous = previous or {}
	nodes = []
	for i, (node_id, movie) in enumerate(zip(node_ids(movies), movies)):
		if node_id in previous:
			x, y = previous[node_id]
		else:
			radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
			angle = i * INITIAL_ANGLE
			x, y = cx + radius * math.cos(angle), cy + radius * math.sin(angle)
		nodes.append(LayoutNode(id=node_id, radius=scale(rating_value(movie)), x=x, y=y, movie=movie))
	return nodes


class ForceSimulation:
	"""
	One layout run. Owns the node state exclusively; callers read positions and
	advance or stop the run, nothing else mutates it.

	Per tick (forces are superposed):
	- repulsion: every pair pushes apart with strength / distance
	- centering: each node is pulled toward the centre by center_strength x offset
	- collision: overlapping pairs (distance < r_i + r_j + padding) are pushed apart,
	  the smaller node moving more
	then velocities are damped by velocity_decay and positions advance.
	Alpha decays geometrically; the run ends when alpha < alpha_min or after max_ticks.
	"""

	def __init__(
		self,
		nodes: List[LayoutNode],
		bounds: Bounds,
		charge_strength: float = 3.0,
		center_strength: float = 0.05,
		collision_strength: float = 1.0,
		collision_padding: float = 3.0,
		collision_iterations: int = 1,
		velocity_decay: float = 0.3,
		alpha: float = 1.0,
		alpha_min: float = 0.001,
		alpha_decay: Optional[float] = None,
		alpha_target: float = 0.0,
		max_ticks: int = 500,
		distance_min: float = 1.0,
		seed: int = 0,
	):
		if not 0 <= velocity_decay < 1:
			raise ValueError(f"velocity_decay must be in [0, 1), got {velocity_decay}")
		self.nodes = nodes
		self.bounds = bounds
		self.charge_strength = charge_strength
		self.center_strength = center_strength
		self.collision_strength = collision_strength
		self.collision_padding = collision_padding
		self.collision_iterations = collision_iterations
		self.velocity_decay = velocity_decay
		self.alpha = alpha
		self.alpha_min = alpha_min
		# Default: reach alpha_min from 1 in ~300 ticks
		self.alpha_decay = alpha_decay if alpha_decay is not None else 1 - alpha_min ** (1 / 300)
		self.alpha_target = alpha_target
		self.max_ticks = max_ticks
		self.distance_min2 = distance_min * distance_min
		self.ticks = 0
		self._stopped = False
		self._rng = np.random.default_rng(seed)  # jiggle for coincident nodes

		self._x = np.array([n.x for n in nodes], dtype=float)
		self._y = np.array([n.y for n in nodes], dtype=float)
		self._vx = np.array([n.vx for n in nodes], dtype=float)
		self._vy = np.array([n.vy for n in nodes], dtype=float)
		self._r = np.array([n.radius for n in nodes], dtype=float)

		# Nothing to arrange: a lone node sits at the centre, no forces are computed
		if len(nodes) <= 1:
			if nodes:
				self._x[:], self._y[:] = bounds.center
				self._vx[:] = self._vy[:] = 0.0
			self.alpha = 0.0
		logger.debug(f"[Layout] Simulation created with {len(nodes)} nodes in {bounds.width}x{bounds.height}")

	@property
	def converged(self) -> bool:
		return self.alpha < self.alpha_min

	@property
	def done(self) -> bool:
		return self._stopped or self.converged or self.ticks >= self.max_ticks

	def stop(self):
		"""End the run; later advance() calls return the current positions unchanged."""
		self._stopped = True

	def advance(self, ticks: int = 1) -> Positions:
		"""Run up to `ticks` steps (fewer if the run finishes) and return positions."""
		for _ in range(ticks):
			if self.done:
				break
			self._tick()
		return self.positions()

	def run(self) -> Positions:
		"""Step until convergence, max_ticks, or stop()."""
		while not self.done:
			self._tick()
		logger.debug(f"[Layout] Finished after {self.ticks} ticks (alpha={self.alpha:.5f})")
		return self.positions()

	def positions(self) -> Positions:
		return {n.id: (float(x), float(y)) for n, x, y in zip(self.nodes, self._x, self._y)}

	def snapshot(self) -> List[LayoutNode]:
		"""Copy the internal state back onto the LayoutNode records and return them."""
		for i, node in enumerate(self.nodes):
			node.x, node.y = float(self._x[i]), float(self._y[i])
			node.vx, node.vy = float(self._vx[i]), float(self._vy[i])
		return self.nodes

	def _tick(self):
		self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
		self._apply_repulsion()
		self._apply_centering()
		for _ in range(self.collision_iterations):
			self._apply_collision()
		self._vx *= 1 - self.velocity_decay
		self._vy *= 1 - self.velocity_decay
		self._x += self._vx
		self._y += self._vy
		self.ticks += 1

	def _apply_repulsion(self):
		if self.charge_strength == 0:
			return
		# dx[i, j] = x_j - x_i
		dx = self._x[None, :] - self._x[:, None]
		dy = self._y[None, :] - self._y[:, None]
		n = len(self._x)
		off_diagonal = ~np.eye(n, dtype=bool)
		coincident = off_diagonal & (dx == 0) & (dy == 0)
		if coincident.any():
			dx = np.where(coincident, (self._rng.random((n, n)) - 0.5) * 1e-6, dx)
			dy = np.where(coincident, (self._rng.random((n, n)) - 0.5) * 1e-6, dy)
		d2 = np.maximum(dx * dx + dy * dy, self.distance_min2)
		d2[~off_diagonal] = np.inf
		k = self.charge_strength * self.alpha
		# Push node i away from every j
		self._vx -= (dx / d2).sum(axis=1) * k
		self._vy -= (dy / d2).sum(axis=1) * k

	def _apply_centering(self):
		cx, cy = self.bounds.center
		k = self.center_strength * self.alpha
		self._vx += (cx - self._x) * k
		self._vy += (cy - self._y) * k

	def _apply_collision(self):
		n = len(self._x)
		r = self._r + self.collision_padding / 2  # padding split across the pair
		r2 = r * r
		for i in range(n - 1):
			# Predicted positions after this tick's velocity
			xi = self._x[i] + self._vx[i]
			yi = self._y[i] + self._vy[i]
			j = slice(i + 1, n)
			px = xi - (self._x[j] + self._vx[j])
			py = yi - (self._y[j] + self._vy[j])
			reach = r[i] + r[j]
			l2 = px * px + py * py
			overlap = l2 < reach * reach
			if not overlap.any():
				continue
			same = overlap & (l2 == 0)
			if same.any():
				px = np.where(same, (self._rng.random(px.shape) - 0.5) * 1e-6, px)
				py = np.where(same, (self._rng.random(py.shape) - 0.5) * 1e-6, py)
				l2 = px * px + py * py
			dist = np.sqrt(l2)
			push = np.where(overlap, (reach - dist) / dist * self.collision_strength, 0.0)
			px, py = px * push, py * push
			# Node i moves by its neighbour's share of the combined area, j by the rest
			share = r2[j] / (r2[i] + r2[j])
			self._vx[i] += (px * share).sum()
			self._vy[i] += (py * share).sum()
			self._vx[j] -= px * (1 - share)
			self._vy[j] -= py * (1 - share)


class LayoutController:
	"""
	Single owner of the in-flight simulation. Starting a new run stops the previous one
	first so two runs never write positions for the same view.
	"""

	def __init__(self, warm_start: bool = True, **simulation_params):
		self.warm_start = warm_start  # restart from last positions for ids that persist
		self.simulation_params = simulation_params
		self.simulation: Optional[ForceSimulation] = None
		self._last_positions: Positions = {}

	def start(self, movies: List[Movie], bounds: Bounds, radius_range: Tuple[float, float] = DEFAULT_RADIUS_RANGE) -> ForceSimulation:
		if self.simulation is not None:
			self._last_positions = self.simulation.positions()
			self.simulation.stop()
			logger.debug("[Layout] Stopped in-flight simulation before restart")
		previous = self._last_positions if self.warm_start else None
		bounds = Bounds(*bounds)
		nodes = build_nodes(movies, bounds, radius_range, previous=previous)
		self.simulation = ForceSimulation(nodes, bounds, **self.simulation_params)
		return self.simulation

	def advance(self, ticks: int = 1) -> Positions:
		"""Advance the current run (one frame's worth of ticks)."""
		if self.simulation is None:
			return {}
		return self.simulation.advance(ticks)

	def stop(self):
		if self.simulation is not None:
			self.simulation.stop()

	def positions(self) -> Positions:
		return self.simulation.positions() if self.simulation is not None else {}


def layout(
	movies: List[Movie],
	bounds: Bounds,
	radius_range: Tuple[float, float] = DEFAULT_RADIUS_RANGE,
	previous: Optional[Positions] = None,
	**simulation_params,
) -> Positions:
	"""Run a complete simulation for `movies` and return {node_id: (x, y)}."""
	bounds = Bounds(*bounds)
	if bounds.width <= 0 or bounds.height <= 0:
		logger.warning(f"[Layout] Degenerate bounds {tuple(bounds)}; using 1x1")
		bounds = Bounds(max(bounds.width, 1.0), max(bounds.height, 1.0))
	nodes = build_nodes(movies, bounds, radius_range, previous=previous)
	return ForceSimulation(nodes, bounds, **simulation_params).run()
