"""
A* search over terrain grids.

Movement is 8-directional. Entering a cell costs that cell's terrain cost,
multiplied by sqrt(2) for diagonal steps; impassable cells are never
entered. The heuristic is the straight-line distance to the goal, which
never overestimates because every step costs at least its length.

The open set is a binary min-heap keyed on f-score with a coordinate index,
so a cheaper route to a queued cell updates its entry in place instead of
adding a duplicate. Popped cells go into a closed set and are skipped if
seen again.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
import structlog

from .classifier import TerrainGrid

logger = structlog.get_logger()

Coord = Tuple[int, int]

DIAGONAL_MULTIPLIER = math.sqrt(2)

# (dx, dy) offsets for the 8 neighbours, in expansion order
DIRECTIONS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


@dataclass
class SearchNode:
    """A cell reached during a search, with its best known costs."""

    x: int
    y: int
    g: float = 0.0
    h: float = 0.0
    f: float = 0.0
    parent: Optional["SearchNode"] = field(default=None, repr=False, compare=False)

    @property
    def coord(self) -> Coord:
        return (self.x, self.y)


@dataclass
class PathResult:
    """
    Outcome of a search.

    ``path`` lists (x, y) cells from start to goal inclusive and is empty on
    failure. ``distance`` is the summed movement cost, 0 for a trivial or a
    failed search. The timing and expansion diagnostics do not take part in
    equality.
    """

    path: List[Coord]
    distance: float
    success: bool
    computation_time_ms: Optional[float] = field(default=None, compare=False)
    expanded: int = field(default=0, compare=False)

    @classmethod
    def failure(cls, computation_time_ms: Optional[float] = None, expanded: int = 0) -> "PathResult":
        return cls([], 0.0, False, computation_time_ms, expanded)

    @property
    def steps(self) -> int:
        return max(len(self.path) - 1, 0)


class IndexedBinaryHeap:
    """
    Min-heap of SearchNodes ordered by f-score.

    A coordinate -> slot index allows ``push`` to replace a queued node for
    the same cell and restore heap order from that slot. Equal f-scores are
    ordered by insertion sequence, which keeps searches deterministic.
    """

    def __init__(self):
        self._heap: List[Tuple[float, int, SearchNode]] = []
        self._index: Dict[Coord, int] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def _less(self, i: int, j: int) -> bool:
        return self._heap[i][:2] < self._heap[j][:2]

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._index[heap[i][2].coord] = i
        self._index[heap[j][2].coord] = j

    def _sift_up(self, i: int) -> None:
        while i > 0:
            parent = (i - 1) // 2
            if not self._less(i, parent):
                break
            self._swap(i, parent)
            i = parent

    def _sift_down(self, i: int) -> None:
        size = len(self._heap)
        while True:
            smallest = i
            left = 2 * i + 1
            right = left + 1
            if left < size and self._less(left, smallest):
                smallest = left
            if right < size and self._less(right, smallest):
                smallest = right
            if smallest == i:
                break
            self._swap(i, smallest)
            i = smallest

    def push(self, node: SearchNode) -> None:
        """Insert a node, or replace the queued node for the same cell."""
        entry = (node.f, self._counter, node)
        self._counter += 1
        slot = self._index.get(node.coord)
        if slot is None:
            self._heap.append(entry)
            slot = len(self._heap) - 1
            self._index[node.coord] = slot
            self._sift_up(slot)
            return

        old_f = self._heap[slot][0]
        self._heap[slot] = entry
        if node.f < old_f:
            self._sift_up(slot)
        else:
            # Equal f still moves down: the replacement has a newer sequence number
            self._sift_down(slot)

    def pop(self) -> SearchNode:
        """Remove and return the node with the lowest f-score."""
        if not self._heap:
            raise IndexError("pop from empty heap")
        last = self._heap.pop()
        if not self._heap:
            del self._index[last[2].coord]
            return last[2]
        root = self._heap[0]
        self._heap[0] = last
        del self._index[root[2].coord]
        self._index[last[2].coord] = 0
        self._sift_down(0)
        return root[2]


def heuristic(x: int, y: int, goal_x: int, goal_y: int) -> float:
    """Euclidean distance between two cells."""
    return math.hypot(x - goal_x, y - goal_y)


def reconstruct_path(node: SearchNode) -> List[Coord]:
    path = []
    current: Optional[SearchNode] = node
    while current is not None:
        path.append(current.coord)
        current = current.parent
    path.reverse()
    return path


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


def find_path(
    start_x: int,
    start_y: int,
    end_x: int,
    end_y: int,
    grid: TerrainGrid,
    costs: Optional[np.ndarray] = None,
) -> PathResult:
    """
    Find the cheapest route between two cells.

    Args:
        start_x, start_y: Start cell
        end_x, end_y: Goal cell
        grid: Terrain to search; treated as read-only
        costs: Optional per-cell cost array ``[y, x]`` overriding the terrain
            table, e.g. one precomputed with ``grid.costs()`` and reused
            across searches

    Returns:
        PathResult; failures (out of bounds, impassable endpoint, no route)
        are reported with ``success=False`` rather than raised
    """
    started = time.perf_counter()

    if not (grid.in_bounds(start_x, start_y) and grid.in_bounds(end_x, end_y)):
        logger.debug(
            "Path endpoint out of bounds",
            start=(start_x, start_y),
            end=(end_x, end_y),
        )
        return PathResult.failure()

    if costs is None:
        costs = grid.costs()

    if math.isinf(costs[start_y, start_x]) or math.isinf(costs[end_y, end_x]):
        logger.debug("Path endpoint impassable", start=(start_x, start_y), end=(end_x, end_y))
        return PathResult.failure()

    if start_x == end_x and start_y == end_y:
        return PathResult([(start_x, start_y)], 0.0, True, _elapsed_ms(started))

    width = grid.width
    height = grid.height
    goal = (end_x, end_y)

    open_set = IndexedBinaryHeap()
    closed = set()
    g_score: Dict[Coord, float] = {(start_x, start_y): 0.0}

    h0 = heuristic(start_x, start_y, end_x, end_y)
    open_set.push(SearchNode(start_x, start_y, 0.0, h0, h0))

    while open_set:
        current = open_set.pop()
        current_coord = current.coord
        if current_coord in closed:
            continue
        closed.add(current_coord)

        if current_coord == goal:
            path = reconstruct_path(current)
            elapsed = _elapsed_ms(started)
            logger.debug(
                "Path found",
                distance=current.g,
                steps=len(path) - 1,
                expanded=len(closed),
                elapsed_ms=round(elapsed, 3),
            )
            return PathResult(path, current.g, True, elapsed, len(closed))

        for dx, dy in DIRECTIONS:
            nx = current.x + dx
            ny = current.y + dy
            if nx < 0 or ny < 0 or nx >= width or ny >= height:
                continue
            neighbor = (nx, ny)
            if neighbor in closed:
                continue
            terrain_cost = costs[ny, nx]
            if math.isinf(terrain_cost):
                continue

            move_cost = terrain_cost * DIAGONAL_MULTIPLIER if dx and dy else terrain_cost
            tentative = current.g + float(move_cost)
            if tentative < g_score.get(neighbor, math.inf):
                g_score[neighbor] = tentative
                h = heuristic(nx, ny, end_x, end_y)
                open_set.push(SearchNode(nx, ny, tentative, h, tentative + h, current))

    elapsed = _elapsed_ms(started)
    logger.debug(
        "No path exists",
        start=(start_x, start_y),
        end=goal,
        expanded=len(closed),
        elapsed_ms=round(elapsed, 3),
    )
    return PathResult.failure(elapsed, len(closed))
