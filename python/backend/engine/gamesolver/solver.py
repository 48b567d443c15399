"""Block towers solver — breadth-first search over tower configurations.

Every legal move costs one, so a breadth-first search finds the minimum
number of moves.  Two strategies share the same contract:

  - ``bfs``: single frontier from the start, first-found exit on the
    target key.
  - ``bidirectional``: frontiers from both ends, expanded a whole layer at
    a time.  Moves are reversible (``dst → src`` undoes ``src → dst``), so
    the search from the target walks the same graph.  Any meeting found
    while expanding the first touching layer has optimal length.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from backend.engine.gamemoves.moves import MoveEngine
from backend.models.configuration import ConfigKey, Configuration, Move

logger = logging.getLogger(__name__)

STRATEGIES = ("bfs", "bidirectional")

# key -> (parent key, move from parent to key); the root maps to None.
_Parents = dict[ConfigKey, tuple[ConfigKey, Move] | None]


@dataclass(frozen=True)
class SolverLimits:
    """Ceilings that guarantee termination; generous, not tight."""

    max_depth: int = 200
    max_iterations: int = 2_000_000

    def __post_init__(self) -> None:
        if self.max_depth < 1 or self.max_iterations < 1:
            raise ValueError(
                f"Solver limits must be positive, got depth={self.max_depth}, "
                f"iterations={self.max_iterations}."
            )


@dataclass(frozen=True)
class Solution:
    optimal_moves: int
    path: tuple[Move, ...]


class SearchExhaustedError(RuntimeError):
    """The search hit its depth or iteration ceiling without a path."""

    def __init__(self, iterations: int, depth: int) -> None:
        super().__init__(
            f"Search exhausted after {iterations} iterations at depth {depth}."
        )
        self.iterations = iterations
        self.depth = depth


class UnreachableTargetError(RuntimeError):
    """The search explored every configuration reachable from one end
    without meeting the other, so no sequence of moves connects them.

    With 11 or 12 blocks the free slots cannot uncover every bottom block,
    and the move graph splits into many components.
    """

    def __init__(self, iterations: int, explored: int) -> None:
        super().__init__(
            f"Target unreachable: {explored} configurations explored "
            f"in {iterations} iterations."
        )
        self.iterations = iterations
        self.explored = explored


class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def solve(
        start: Configuration,
        target: Configuration,
        limits: SolverLimits = SolverLimits(),
        strategy: str = "bidirectional",
    ) -> Solution:
        """Return the optimal move count and a path from *start* to *target*.

        Raises ``SearchExhaustedError`` if the limits run out first,
        ``UnreachableTargetError`` once the search proves no path exists,
        and ``ValueError`` for an unknown *strategy*.
        """
        if strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown solver strategy {strategy!r}; "
                f"expected one of {', '.join(STRATEGIES)}."
            )

        start_key = start.key()
        target_key = target.key()
        if start_key == target_key:
            return Solution(optimal_moves=0, path=())

        if strategy == "bfs":
            path = Solver._breadth_first(start_key, target_key, limits)
        else:
            path = Solver._bidirectional(start_key, target_key, limits)

        logger.info("Solved %s -> %s in %d moves", start, target, len(path))
        return Solution(optimal_moves=len(path), path=tuple(path))

    # -- strategies -----------------------------------------------------------

    @staticmethod
    def _breadth_first(
        start_key: ConfigKey, target_key: ConfigKey, limits: SolverLimits
    ) -> list[Move]:
        frontier: deque[tuple[ConfigKey, int]] = deque([(start_key, 0)])
        visited = {start_key}
        parents: _Parents = {start_key: None}
        iterations = 0
        depth = 0

        while frontier:
            if iterations >= limits.max_iterations:
                raise SearchExhaustedError(iterations, depth)
            key, moves = frontier.popleft()
            iterations += 1
            depth = moves
            if moves >= limits.max_depth:
                raise SearchExhaustedError(iterations, depth)

            for move, next_key in MoveEngine.successors(key):
                if next_key == target_key:
                    parents[next_key] = (key, move)
                    logger.debug(
                        "bfs: reached target after %d iterations, %d visited",
                        iterations, len(visited),
                    )
                    return Solver._walk_back(parents, target_key)
                if next_key not in visited:
                    visited.add(next_key)
                    parents[next_key] = (key, move)
                    frontier.append((next_key, moves + 1))

        raise UnreachableTargetError(iterations, len(visited))

    @staticmethod
    def _bidirectional(
        start_key: ConfigKey, target_key: ConfigKey, limits: SolverLimits
    ) -> list[Move]:
        forward: _Parents = {start_key: None}
        backward: _Parents = {target_key: None}
        forward_layer = [start_key]
        backward_layer = [target_key]
        forward_depth = backward_depth = 0
        iterations = 0

        while forward_layer and backward_layer:
            if forward_depth + backward_depth >= limits.max_depth:
                raise SearchExhaustedError(
                    iterations, forward_depth + backward_depth
                )

            expand_forward = len(forward_layer) <= len(backward_layer)
            if expand_forward:
                layer, seen, other = forward_layer, forward, backward
            else:
                layer, seen, other = backward_layer, backward, forward

            next_layer: list[ConfigKey] = []
            for key in layer:
                iterations += 1
                if iterations > limits.max_iterations:
                    raise SearchExhaustedError(
                        iterations - 1, forward_depth + backward_depth
                    )
                for move, next_key in MoveEngine.successors(key):
                    if next_key in other:
                        logger.debug(
                            "bidirectional: frontiers met after %d iterations, "
                            "%d + %d visited",
                            iterations, len(forward), len(backward),
                        )
                        if expand_forward:
                            return (
                                Solver._walk_back(forward, key)
                                + [move]
                                + Solver._walk_forward(backward, next_key)
                            )
                        return (
                            Solver._walk_back(forward, next_key)
                            + [move.reversed()]
                            + Solver._walk_forward(backward, key)
                        )
                    if next_key not in seen:
                        seen[next_key] = (key, move)
                        next_layer.append(next_key)

            if expand_forward:
                forward_layer = next_layer
                forward_depth += 1
            else:
                backward_layer = next_layer
                backward_depth += 1

        # One side ran out of configurations without touching the other.
        raise UnreachableTargetError(iterations, len(forward) + len(backward))

    # -- path reconstruction --------------------------------------------------

    @staticmethod
    def _walk_back(parents: _Parents, key: ConfigKey) -> list[Move]:
        """Moves from the search root to *key*, in playing order."""
        path: deque[Move] = deque()
        entry = parents[key]
        while entry is not None:
            key, move = entry
            path.appendleft(move)
            entry = parents[key]
        return list(path)

    @staticmethod
    def _walk_forward(parents: _Parents, key: ConfigKey) -> list[Move]:
        """Moves from *key* back to the root of a search run from the target."""
        path: list[Move] = []
        entry = parents[key]
        while entry is not None:
            key, move = entry
            path.append(move.reversed())
            entry = parents[key]
        return path
