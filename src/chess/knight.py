"""
Shortest knight paths.

Key idea: the board is an implicit unweighted graph (64 squares, edges are knight moves),
so a breadth-first search from the source finds a path with the minimum number of moves.
"""

from collections import deque
from dataclasses import dataclass, field

import structlog

from src.chess.square import Square
from src.core.exceptions import InternalInvariantViolation

logger = structlog.get_logger(__name__)

Vector = tuple[int, int]

# Knights always move such that |delta_rank| + |delta_file| = 3.
# The order is fixed: among several shortest paths, BFS returns the one reached first in this order.
KNIGHT_OFFSETS: tuple[Vector, ...] = (
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
)


@dataclass(frozen=True)
class PathResult:
    """Squares from source to target (both inclusive) and the number of moves in between."""

    path: tuple[Square, ...] = field(default_factory=tuple)
    move_count: int = 0

    @property
    def found(self) -> bool:
        return len(self.path) > 0

    def labels(self) -> list[str]:
        return [square.to_label() for square in self.path]


def knight_moves(square: Square) -> list[Square]:
    """All squares a knight on `square` can jump to, in KNIGHT_OFFSETS order."""
    targets: list[Square] = []
    for d_file, d_rank in KNIGHT_OFFSETS:
        target = square.offset(d_file, d_rank)
        if target.is_within_bounds():
            targets.append(target)
    return targets


def is_knight_move(from_square: Square, to_square: Square) -> bool:
    delta = (to_square.file - from_square.file, to_square.rank - from_square.rank)
    return delta in KNIGHT_OFFSETS


def find_path(source: Square, target: Square) -> PathResult:
    """
    Breadth-first search over the knight's move graph.
    ---
    A square is marked visited the moment it is enqueued, so no square ever sits in the frontier twice.
    Paths are rebuilt from a parent map once the target is dequeued.

    Returns an empty PathResult if the target is unreachable. On a standard board that cannot happen.
    """
    if source == target:
        return PathResult(path=(source,), move_count=0)

    parents: dict[Square, Square | None] = {source: None}
    frontier: deque[Square] = deque([source])

    while frontier:
        current = frontier.popleft()
        if current == target:
            path = _rebuild_path(parents, target)
            return PathResult(path=path, move_count=len(path) - 1)

        for neighbour in knight_moves(current):
            if neighbour in parents:
                continue
            parents[neighbour] = current
            frontier.append(neighbour)

    logger.error(
        "knight_path_not_found",
        source=source.to_label(),
        target=target.to_label(),
        visited=len(parents),
    )
    return PathResult()


def require_path(source: Square, target: Square) -> PathResult:
    """find_path(), but an unreachable target is treated as a defect instead of an empty answer."""
    result = find_path(source, target)
    if not result.found:
        raise InternalInvariantViolation(
            f"No knight path from {source} to {target}, the board should be connected."
        )
    return result


def _rebuild_path(parents: dict[Square, Square | None], target: Square) -> tuple[Square, ...]:
    path: list[Square] = []
    step: Square | None = target
    while step is not None:
        path.append(step)
        step = parents[step]
    return tuple(reversed(path))
