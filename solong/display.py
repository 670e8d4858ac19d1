"""Drawing the game with pygame, loading its sprites and running the window."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from .game import (  # noqa: E402
    ESC_KEY,
    KEY_A,
    KEY_D,
    KEY_DOWN,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_S,
    KEY_UP,
    KEY_W,
    Game,
)
from .maps import (  # noqa: E402
    COLLECTIBLE,
    EXIT,
    FLOOR,
    PLAYER,
    TILE_SIZE,
    WALL,
    GameMap,
    MapError,
    read_map,
    validate_map,
)

logger = logging.getLogger(__name__)

IMAGE_DIR = Path("images")
WINDOW_TITLE = "So Long - Hold WASD/Arrows to move, ESC to quit"

_FLOORED_TILES = frozenset({FLOOR, PLAYER, COLLECTIBLE, EXIT})


@dataclass
class Sprites:
    """The images the game draws, and the size used to centre them in a tile."""

    player_right: Optional[pygame.Surface] = None
    player_left: Optional[pygame.Surface] = None
    collectible: Optional[pygame.Surface] = None
    exit: Optional[pygame.Surface] = None
    floor: Optional[pygame.Surface] = None
    wall: Optional[pygame.Surface] = None
    image_width: int = 0
    image_height: int = 0

    @property
    def offsets(self) -> Tuple[int, int]:
        """Pixel offsets that centre an image of the stored size in a tile."""
        return calculate_offsets(TILE_SIZE, self.image_width, self.image_height)


def calculate_offsets(
    tile_size: int, image_width: int, image_height: int
) -> Tuple[int, int]:
    """Offsets that centre an image of the given size inside a tile."""
    return (tile_size - image_width) // 2, (tile_size - image_height) // 2


def load_image(path) -> pygame.Surface:
    """Load one image file; raise :class:`OSError` if it cannot be read."""
    logger.info("Loading image: %s", path)
    try:
        image = pygame.image.load(str(path))
    except (pygame.error, OSError) as exc:
        raise OSError(f"Failed to load image {path}: {exc}") from exc
    if pygame.display.get_init() and pygame.display.get_surface() is not None:
        image = image.convert()
    logger.info("Image loaded successfully (%dx%d)", *image.get_size())
    return image


def load_all_images(image_dir) -> Sprites:
    """Load every sprite from ``image_dir``.

    The sprite size used for centring is that of the last image loaded,
    the wall.
    """
    directory = Path(image_dir)
    sprites = Sprites()
    names = (
        ("player_right", "right_player.xpm"),
        ("player_left", "left_player.xpm"),
        ("collectible", "collectible.xpm"),
        ("exit", "exit.xpm"),
        ("floor", "floor.xpm"),
        ("wall", "wall.xpm"),
    )
    for attribute, filename in names:
        image = load_image(directory / filename)
        setattr(sprites, attribute, image)
        sprites.image_width, sprites.image_height = image.get_size()
    logger.info("All images loaded successfully")
    return sprites


def window_size(game_map: GameMap) -> Tuple[int, int]:
    """Window size in pixels for the whole map."""
    return game_map.width * TILE_SIZE, game_map.height * TILE_SIZE


def check_window_fits(
    width: int, height: int, screen_width: int, screen_height: int
) -> None:
    """Raise :class:`ValueError` if the window is larger than the screen."""
    if width > screen_width or height > screen_height:
        raise ValueError(
            "Window too large for screen "
            f"(window: {width}x{height}, screen: {screen_width}x{screen_height})"
        )


def _draw(surface: pygame.Surface, image: Optional[pygame.Surface], x: int, y: int) -> None:
    if image is not None:
        surface.blit(image, (x, y))


def render_game(surface: pygame.Surface, game: Game, sprites: Sprites) -> None:
    """Draw the map and the player onto ``surface``."""
    off_x, off_y = sprites.offsets
    width = game.map.width
    for y, row in enumerate(game.map.grid):
        for x, tile in enumerate(row[:width]):
            px, py = x * TILE_SIZE + off_x, y * TILE_SIZE + off_y
            if tile in _FLOORED_TILES:
                _draw(surface, sprites.floor, px, py)
            if tile == WALL:
                _draw(surface, sprites.wall, px, py)
            elif tile == COLLECTIBLE:
                _draw(surface, sprites.collectible, px, py)
            elif tile == EXIT:
                _draw(surface, sprites.exit, px, py)
    player = sprites.player_left if game.player_left else sprites.player_right
    _draw(surface, player, game.player_x + off_x, game.player_y + off_y)


def _keycodes() -> dict:
    return {
        pygame.K_ESCAPE: ESC_KEY,
        pygame.K_w: KEY_W,
        pygame.K_a: KEY_A,
        pygame.K_s: KEY_S,
        pygame.K_d: KEY_D,
        pygame.K_UP: KEY_UP,
        pygame.K_LEFT: KEY_LEFT,
        pygame.K_DOWN: KEY_DOWN,
        pygame.K_RIGHT: KEY_RIGHT,
    }


def _redraw(surface: pygame.Surface, game: Game, sprites: Sprites) -> None:
    render_game(surface, game, sprites)
    pygame.display.flip()


def _event_loop(surface: pygame.Surface, game: Game, sprites: Sprites) -> None:
    keymap = _keycodes()
    _redraw(surface, game, sprites)
    print("Controls:")
    print("   - Hold WASD or Arrow keys to move continuously")
    print("   - Press ESC to close")
    print()
    while not game.closed:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                game.closed = True
            elif event.type == pygame.KEYDOWN:
                code = keymap.get(event.key)
                if code is not None:
                    game.key_press(code)
            elif event.type == pygame.KEYUP:
                code = keymap.get(event.key)
                if code is not None:
                    game.key_release(code)
            elif event.type == pygame.VIDEOEXPOSE:
                _redraw(surface, game, sprites)
        if game.closed:
            break
        if game.process_movement():
            _redraw(surface, game, sprites)


def run(path) -> int:
    """Load the map at ``path`` and play it; return the exit status."""
    try:
        game_map = read_map(path)
        logger.info("Map loaded: %dx%d tiles", game_map.width, game_map.height)
        validate_map(game_map)
    except MapError as exc:
        print(f"Error\n{exc}")
        return 1
    game = Game(game_map)
    width, height = window_size(game_map)
    pygame.init()
    try:
        info = pygame.display.Info()
        check_window_fits(width, height, info.current_w, info.current_h)
        surface = pygame.display.set_mode((width, height))
        pygame.display.set_caption(WINDOW_TITLE)
        sprites = load_all_images(IMAGE_DIR)
        _event_loop(surface, game, sprites)
    except (ValueError, OSError, pygame.error) as exc:
        print(f"Error\n{exc}")
        return 1
    finally:
        pygame.quit()
    if game.won:
        print(f"You win! Game completed in {game.move_count} moves!")
    print("Goodbye!")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point: ``solong <map_file.ber>``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Usage: solong <map_file.ber>")
        return 1
    return run(args[0])


if __name__ == "__main__":
    sys.exit(main())