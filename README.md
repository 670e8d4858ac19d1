# solong

A small top-down tile game. You walk a character around a walled map,
pick up every collectible, and then leave through the exit. The exit stays
locked until every collectible has been picked up.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Playing

```
solong path/to/map.ber
```

The command takes exactly one argument, the map file; otherwise it prints a
usage line and exits with status 1.

Hold `W` `A` `S` `D` or the arrow keys to move one tile at a time. Press
`Esc` or close the window to quit. When you leave through the exit with
every collectible picked up, the game closes and prints
`You win! Game completed in N moves!`, followed by `Goodbye!`.

If the map cannot be read or breaks a rule, or the window cannot be set up,
the command prints `Error` and a message, and exits with status 1.

The game loads its sprites from an `images/` directory under the current
working directory: `right_player.xpm`, `left_player.xpm`, `collectible.xpm`,
`exit.xpm`, `floor.xpm` and `wall.xpm`. Each tile is 64 pixels square. If the
window would be bigger than the screen, the game refuses to start.

## Map files

A map is a plain text file, one row per line:

| Character | Meaning          |
|-----------|------------------|
| `1`       | wall             |
| `0`       | floor            |
| `P`       | player start     |
| `C`       | collectible      |
| `E`       | exit             |

For example:

```
1111111
1P0C0E1
1111111
```

A map is accepted only if:

- it is not empty and has no blank lines (a line of only spaces, tabs or
  line breaks counts as blank, including an extra empty line at the end);
- it contains no characters other than the five above;
- it has exactly one `P`, exactly one `E` and at least one `C`;
- every row has the same width as the first row;
- it is surrounded by walls;
- every collectible and the exit can be reached from the player's start.

## Using it as a library

`solong.maps` reads and checks maps. `read_map` returns a `GameMap`, and
`validate_map` runs every check in order, raising `MapError` (a
`ValueError`) on the first rule broken and returning the number of
collectibles otherwise:

```python
from solong.maps import read_map, validate_map, MapError

try:
    game_map = read_map("level.ber")
    collectibles = validate_map(game_map)
except MapError as err:
    print("bad map:", err)
```

The individual checks are also available: `check_valid_characters`,
`check_map_elements`, `check_map_rectangular`, `check_walls_enclosed` and
`validate_paths`, along with `count_elements`, `find_player_position` and
`flood_fill`.

`solong.game.Game` holds the play state and rules without needing a window:
the player's position in pixels (`player_x`, `player_y`), `move_count`,
the locked exit, and `won` / `closed` flags. Input is given as X11 key
codes through `key_press` and `key_release`; `process_movement` advances one
frame and returns `True` when the player moved. Moves are rate-limited: a
move is taken only after 3000 frames have passed since the last one.
`try_move_player` moves the player to a pixel position directly.

`solong.display` draws a `Game` with pygame (`render_game`), loads the
sprites (`load_all_images`), and `run(path)` opens the window and plays a map
file, returning the exit status.

## What it does not do

No sprite images are included; the `images/` directory must be supplied.
Progress during play (each move, collectibles left, a locked exit) is
reported only through Python's `logging` at INFO level, which the command
does not switch on, so nothing of it is shown on the screen or terminal.