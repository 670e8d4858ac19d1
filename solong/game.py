"""Game state: player movement, collectibles, the exit and keyboard input."""

from __future__ import annotations

import logging
from typing import Tuple

from .maps import COLLECTIBLE, EXIT, FLOOR, TILE_SIZE, WALL, GameMap, MapError, find_player_position

logger = logging.getLogger(__name__)

ESC_KEY = 65307
MOVE_DELAY = 3000

KEY_W = 119
KEY_A = 97
KEY_S = 115
KEY_D = 100
KEY_UP = 65362
KEY_LEFT = 65361
KEY_DOWN = 65364
KEY_RIGHT = 65363

_KEY_DIRECTIONS = {
    KEY_W: "w",
    KEY_UP: "w",
    KEY_A: "a",
    KEY_LEFT: "a",
    KEY_S: "s",
    KEY_DOWN: "s",
    KEY_D: "d",
    KEY_RIGHT: "d",
}


class Game:
    """A running game on a validated map.

    The player's position is kept in pixels, a multiple of ``TILE_SIZE``.
    """

    def __init__(self, game_map: GameMap) -> None:
        self.map = game_map
        start = find_player_position(game_map)
        if start is None:
            raise MapError("Player position not found")
        self.player_x = start[0] * TILE_SIZE
        self.player_y = start[1] * TILE_SIZE
        logger.info("Player starting position: (%d, %d)", self.player_x, self.player_y)
        self.player_left = False
        self.move_count = 0
        self.total_collectibles = self.count_collectibles()
        self.keys = {"w": False, "a": False, "s": False, "d": False}
        self.last_move = 0
        self.locked = False
        self.won = False
        self.closed = False

    def count_collectibles(self) -> int:
        """Number of collectibles still on the map."""
        width = self.map.width
        return sum(row[:width].count(COLLECTIBLE) for row in self.map.grid)

    def handle_collectible(self, map_x: int, map_y: int) -> int:
        """Pick up the collectible at the tile; return how many remain."""
        self.map.grid[map_y][map_x] = FLOOR
        remaining = self.count_collectibles()
        logger.info("Collectible collected! %d remaining", remaining)
        return remaining

    def handle_exit(self) -> bool:
        """Try to leave through the exit; True if the game is won."""
        remaining = self.count_collectibles()
        if remaining == 0:
            self.move_count += 1
            self.won = True
            self.closed = True
            logger.info(
                "You collected all items and escaped in %d moves!", self.move_count
            )
            return True
        if not self.locked:
            logger.info(
                "Door is locked! Collect all %d remaining collectibles first!",
                remaining,
            )
        self.locked = True
        return False

    def try_move_player(self, new_x: int, new_y: int) -> bool:
        """Move the player to the pixel position if the tile there allows it."""
        if not (
            0 <= new_x < self.map.width * TILE_SIZE
            and 0 <= new_y < self.map.height * TILE_SIZE
        ):
            return False
        map_x, map_y = new_x // TILE_SIZE, new_y // TILE_SIZE
        tile = self.map.tile(map_x, map_y)
        if tile == WALL:
            return False
        if tile != EXIT:
            self.locked = False
        if tile == COLLECTIBLE:
            self.handle_collectible(map_x, map_y)
        elif tile == EXIT:
            return self.handle_exit()
        self.player_x, self.player_y = new_x, new_y
        self.move_count += 1
        logger.info(
            "Player moved to (%d, %d) - Move #%d",
            self.player_x,
            self.player_y,
            self.move_count,
        )
        return True

    def next_position(self) -> Tuple[int, int]:
        """Pixel position the held keys point to; updates the facing flag."""
        x, y = self.player_x, self.player_y
        if self.keys["w"]:
            y -= TILE_SIZE
        elif self.keys["s"]:
            y += TILE_SIZE
        elif self.keys["a"]:
            x -= TILE_SIZE
            self.player_left = False
        elif self.keys["d"]:
            x += TILE_SIZE
            self.player_left = True
        return x, y

    def process_movement(self) -> bool:
        """Advance one frame; True if the player moved and a redraw is due."""
        if self.last_move < MOVE_DELAY:
            self.last_move += 1
            return False
        new_x, new_y = self.next_position()
        if (new_x, new_y) == (self.player_x, self.player_y):
            return False
        if self.try_move_player(new_x, new_y):
            self.last_move = 0
            return True
        return False

    def key_press(self, keycode: int) -> None:
        """Record a pressed key; ESC asks for the game to close."""
        if keycode == ESC_KEY:
            logger.info("ESC pressed - closing window")
            self.closed = True
        direction = _KEY_DIRECTIONS.get(keycode)
        if direction is not None:
            self.keys[direction] = True

    def key_release(self, keycode: int) -> None:
        """Record a released key."""
        direction = _KEY_DIRECTIONS.get(keycode)
        if direction is not None:
            self.keys[direction] = False