"""Loading and validating tile maps for the game.

A map is a rectangle of single-character tiles:

* ``0``: floor
* ``1``: wall
* ``P``: the player's start
* ``E``: the exit
* ``C``: a collectible
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple, Union

TILE_SIZE = 64

FLOOR = "0"
WALL = "1"
PLAYER = "P"
EXIT = "E"
COLLECTIBLE = "C"
VISITED = "V"

VALID_TILES = frozenset({FLOOR, WALL, PLAYER, EXIT, COLLECTIBLE})

_BLANK = frozenset(" \t\n\r")
_LINE_RE = re.compile(r"[^\n]*\n|[^\n]+")

PathType = Union[str, "PathLike[str]"]


class MapError(ValueError):
    """Raised when a map cannot be read or breaks one of the map rules."""


@dataclass
class GameMap:
    """A grid of tiles, indexed as ``grid[y][x]``."""

    grid: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.grid = [list(row) for row in self.grid]

    @property
    def width(self) -> int:
        """Width of the first row, which every other row must match."""
        return len(self.grid[0]) if self.grid else 0

    @property
    def height(self) -> int:
        return len(self.grid)

    @property
    def rows(self) -> list:
        return ["".join(row) for row in self.grid]

    def tile(self, x: int, y: int) -> str:
        """Return the tile at column ``x`` and row ``y``."""
        if x < 0 or y < 0:
            raise IndexError(f"tile position ({x}, {y}) is outside the map")
        return self.grid[y][x]

    def count(self, tile: str) -> int:
        """Number of cells holding ``tile``."""
        return sum(row.count(tile) for row in self.grid)

    def __str__(self) -> str:
        return "\n".join(self.rows)


def is_empty_line(line: Optional[str]) -> bool:
    """True if ``line`` is missing or holds only spaces, tabs and line breaks."""
    if line is None:
        return True
    return all(char in _BLANK for char in line)


def _read_lines(path: PathType) -> list:
    """Lines of the file, each keeping its trailing newline."""
    text = Path(path).read_bytes().decode("latin-1")
    return _LINE_RE.findall(text)


def find_height(path: PathType) -> int:
    """Count the map's lines; 0 if the file is unreadable or has a blank line."""
    try:
        lines = _read_lines(path)
    except OSError:
        return 0
    if any(is_empty_line(line) for line in lines):
        return 0
    return len(lines)


def read_map(path: PathType) -> GameMap:
    """Read a map file into a :class:`GameMap`."""
    if find_height(path) == 0:
        raise MapError(
            f"Failed to load map {path}: "
            "map file is empty or contains only blank lines"
        )
    try:
        lines = _read_lines(path)
    except OSError as exc:
        raise MapError(f"Failed to load map {path}: {exc}") from exc
    rows = [
        line[:-1] if line.endswith("\n") else line
        for line in lines
        if not is_empty_line(line)
    ]
    return GameMap(rows)


def check_valid_characters(game_map: GameMap) -> None:
    """Raise :class:`MapError` on the first tile that is not 0, 1, P, E or C."""
    width = game_map.width
    for y, row in enumerate(game_map.grid):
        for x, tile in enumerate(row[:width]):
            if tile not in VALID_TILES:
                raise MapError(
                    f"Invalid character {tile!r} at position ({x},{y}); "
                    "valid characters are: 0, 1, P, E, C"
                )


def count_elements(game_map: GameMap) -> Tuple[int, int, int]:
    """Return the numbers of players, exits and collectibles on the map."""
    width = game_map.width
    players = exits = collectibles = 0
    for row in game_map.grid:
        for tile in row[:width]:
            if tile == PLAYER:
                players += 1
            elif tile == EXIT:
                exits += 1
            elif tile == COLLECTIBLE:
                collectibles += 1
    return players, exits, collectibles


def check_map_elements(game_map: GameMap) -> int:
    """Require one player, one exit and some collectibles; return their count."""
    players, exits, collectibles = count_elements(game_map)
    if players != 1:
        raise MapError("Map must have exactly 1 player (P)")
    if exits != 1:
        raise MapError("Map must have exactly 1 exit (E)")
    if collectibles < 1:
        raise MapError("Map must have at least 1 collectible (C)")
    return collectibles


def check_map_rectangular(game_map: GameMap) -> None:
    """Raise :class:`MapError` if a row's width differs from the first row's."""
    expected = game_map.width
    for y, row in enumerate(game_map.grid):
        if len(row) != expected:
            raise MapError(
                f"Width mismatch at row {y}: width={len(row)}, "
                f"expected={expected}, row content: {''.join(row)!r}"
            )


def check_walls_enclosed(game_map: GameMap) -> None:
    """Raise :class:`MapError` unless the map's border is all walls."""
    width, height = game_map.width, game_map.height
    border = [(x, 0) for x in range(width)]
    border += [(x, height - 1) for x in range(width)]
    border += [(0, y) for y in range(height)]
    border += [(width - 1, y) for y in range(height)]
    if any(game_map.tile(x, y) != WALL for x, y in border):
        raise MapError("Map must be surrounded by walls")


def find_player_position(game_map: GameMap) -> Optional[Tuple[int, int]]:
    """Return the ``(x, y)`` tile of the first player found, or None."""
    width = game_map.width
    for y, row in enumerate(game_map.grid):
        for x, tile in enumerate(row[:width]):
            if tile == PLAYER:
                return x, y
    return None


def flood_fill(grid: Sequence[list], x: int, y: int) -> Tuple[int, int]:
    """Mark every cell reachable from ``(x, y)`` as visited.

    The grid is changed in place: reached cells become ``V``. Returns the
    numbers of collectibles and exits that were reached.
    """
    height = len(grid)
    width = len(grid[0]) if height else 0
    collectibles = exits = 0
    pending = [(x, y)]
    while pending:
        cx, cy = pending.pop()
        if not (0 <= cx < width and 0 <= cy < height):
            continue
        tile = grid[cy][cx]
        if tile in (WALL, VISITED):
            continue
        if tile == COLLECTIBLE:
            collectibles += 1
        elif tile == EXIT:
            exits += 1
        grid[cy][cx] = VISITED
        pending.extend(
            [(cx, cy - 1), (cx, cy + 1), (cx - 1, cy), (cx + 1, cy)]
        )
    return collectibles, exits


def validate_paths(game_map: GameMap) -> None:
    """Require every collectible and the exit to be reachable from the player."""
    start = find_player_position(game_map)
    if start is None:
        raise MapError("Player position not found")
    total = count_elements(game_map)[2]
    grid = [list(row) for row in game_map.grid]
    collectibles_found, exits_found = flood_fill(grid, *start)
    if collectibles_found != total:
        raise MapError(
            "Not all collectibles are reachable "
            f"({collectibles_found}/{total} reachable)"
        )
    if exits_found != 1:
        raise MapError("Exit is not reachable")


def validate_map(game_map: GameMap) -> int:
    """Run every map check in order; return the number of collectibles."""
    check_valid_characters(game_map)
    collectibles = check_map_elements(game_map)
    check_map_rectangular(game_map)
    check_walls_enclosed(game_map)
    validate_paths(game_map)
    return collectibles


def _join_rows(rows: Iterable[str]) -> str:
    return "\n".join(rows)