"""Shortest paths through a grid maze where ``True`` cells are open."""

from __future__ import annotations

import heapq
import math
from itertools import count
from typing import Callable, NamedTuple, Sequence

Maze = Sequence[Sequence[bool]]

# Up, left, right, down: the order in which neighbours are explored.
_STEPS = ((0, -1), (-1, 0), (1, 0), (0, 1))


class Point(NamedTuple):
    """A cell of the maze, addressed by column and row."""

    x: int
    y: int


def _inside(maze: Maze, x: int, y: int) -> bool:
    return 0 <= y < len(maze) and 0 <= x < len(maze[y])


def _is_open(maze: Maze, x: int, y: int) -> bool:
    return _inside(maze, x, y) and bool(maze[y][x])


def neighbours(maze: Maze, point: Point) -> list[Point]:
    """Return the open cells next to ``point``: up, left, right, then down."""
    x, y = point
    return [
        Point(x + dx, y + dy)
        for dx, dy in _STEPS
        if _is_open(maze, x + dx, y + dy)
    ]


def _search(
    maze: Maze,
    start: Point,
    end: Point,
    heuristic: Callable[[Point], float],
) -> list[Point]:
    if not _inside(maze, start.x, start.y):
        raise ValueError(f"start {tuple(start)} lies outside the maze")

    distance = {start: 0}
    came_from: dict[Point, Point] = {}
    finished: set[Point] = set()
    order = count()
    queue = [(heuristic(start), next(order), start)]

    while queue:
        _, _, current = heapq.heappop(queue)
        if current == end:
            path = [current]
            while current in came_from:
                current = came_from[current]
                path.append(current)
            path.reverse()
            return path
        if current in finished:
            continue
        finished.add(current)

        step_distance = distance[current] + 1
        for child in neighbours(maze, current):
            if step_distance < distance.get(child, math.inf):
                distance[child] = step_distance
                came_from[child] = current
                heapq.heappush(
                    queue, (step_distance + heuristic(child), next(order), child)
                )

    raise ValueError(f"no path from {tuple(start)} to {tuple(end)}")


def dijkstra(
    maze: Maze, start_x: int, start_y: int, end_x: int, end_y: int
) -> list[Point]:
    """Find a shortest path from start to end, both ends included."""
    return _search(maze, Point(start_x, start_y), Point(end_x, end_y), lambda _: 0.0)


def astar(
    maze: Maze, start_x: int, start_y: int, end_x: int, end_y: int
) -> list[Point]:
    """Find a shortest path, guided by the straight-line distance to the end."""
    end = Point(end_x, end_y)

    def remaining(point: Point) -> float:
        return math.hypot(point.x - end.x, point.y - end.y)

    return _search(maze, Point(start_x, start_y), end, remaining)