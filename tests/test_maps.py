import pytest

from solong.maps import (
    GameMap,
    MapError,
    check_map_elements,
    check_map_rectangular,
    check_valid_characters,
    check_walls_enclosed,
    count_elements,
    find_height,
    find_player_position,
    flood_fill,
    is_empty_line,
    read_map,
    validate_map,
    validate_paths,
)

VALID_ROWS = [
    "1111111",
    "1P0C0E1",
    "1000001",
    "1111111",
]


def write_map(tmp_path, text, name="map.ber"):
    path = tmp_path / name
    path.write_text(text, encoding="latin-1", newline="")
    return path


def test_gamemap_dimensions_and_tiles():
    game_map = GameMap(VALID_ROWS)
    assert game_map.width == len(VALID_ROWS[0])
    assert game_map.height == len(VALID_ROWS)
    assert game_map.tile(1, 1) == "P"
    assert game_map.tile(5, 1) == "E"
    assert game_map.rows == VALID_ROWS


def test_gamemap_tile_rejects_negative_positions():
    with pytest.raises(IndexError):
        GameMap(VALID_ROWS).tile(-1, 0)


def test_gamemap_count():
    game_map = GameMap(VALID_ROWS)
    assert game_map.count("C") == 1
    assert game_map.count("P") == 1
    assert game_map.count("X") == 0


@pytest.mark.parametrize(
    "line, expected",
    [
        (None, True),
        ("", True),
        ("\n", True),
        (" \t\r\n", True),
        ("101\n", False),
        ("  1 ", False),
    ],
)
def test_is_empty_line(line, expected):
    assert is_empty_line(line) is expected


def test_find_height_counts_lines(tmp_path):
    path = write_map(tmp_path, "\n".join(VALID_ROWS) + "\n")
    assert find_height(path) == len(VALID_ROWS)


def test_find_height_without_trailing_newline(tmp_path):
    path = write_map(tmp_path, "\n".join(VALID_ROWS))
    assert find_height(path) == len(VALID_ROWS)


def test_find_height_blank_line_gives_zero(tmp_path):
    path = write_map(tmp_path, "111\n\n111\n")
    assert find_height(path) == 0


def test_find_height_missing_file_gives_zero(tmp_path):
    assert find_height(tmp_path / "absent.ber") == 0


def test_read_map_round_trip(tmp_path):
    path = write_map(tmp_path, "\n".join(VALID_ROWS) + "\n")
    game_map = read_map(path)
    assert game_map.rows == VALID_ROWS
    assert str(game_map) == "\n".join(VALID_ROWS)


def test_read_map_keeps_carriage_return(tmp_path):
    path = write_map(tmp_path, "111\r\n111\r\n")
    game_map = read_map(path)
    assert game_map.rows == ["111\r", "111\r"]
    with pytest.raises(MapError, match="Invalid character"):
        check_valid_characters(game_map)


def test_read_map_empty_file(tmp_path):
    path = write_map(tmp_path, "")
    with pytest.raises(MapError, match="empty"):
        read_map(path)


def test_read_map_blank_line_inside(tmp_path):
    path = write_map(tmp_path, "1111\n\n1111\n")
    with pytest.raises(MapError):
        read_map(path)


def test_read_map_missing_file(tmp_path):
    with pytest.raises(MapError):
        read_map(tmp_path / "absent.ber")


def test_check_valid_characters_rejects_unknown_tile():
    game_map = GameMap(["11111", "1PXE1", "11111"])
    with pytest.raises(MapError, match="'X' at position \\(2,1\\)"):
        check_valid_characters(game_map)


def test_count_elements():
    assert count_elements(GameMap(VALID_ROWS)) == (1, 1, 1)


def test_check_map_elements_returns_collectibles():
    rows = ["111111", "1PCCE1", "111111"]
    assert check_map_elements(GameMap(rows)) == 2


@pytest.mark.parametrize(
    "rows, message",
    [
        (["111111", "1PPCE1", "111111"], "exactly 1 player"),
        (["111111", "10C0E1", "111111"], "exactly 1 player"),
        (["111111", "1P0CE1", "1E0001", "111111"], "exactly 1 exit"),
        (["111111", "1P00E1", "111111"], "at least 1 collectible"),
    ],
)
def test_check_map_elements_errors(rows, message):
    with pytest.raises(MapError, match=message):
        check_map_elements(GameMap(rows))


def test_check_map_rectangular_accepts_valid():
    game_map = GameMap(VALID_ROWS)
    check_map_rectangular(game_map)
    assert all(len(row) == game_map.width for row in game_map.rows)


def test_check_map_rectangular_rejects_ragged():
    with pytest.raises(MapError, match="row 1"):
        check_map_rectangular(GameMap(["11111", "1PCE", "11111"]))


def test_check_walls_enclosed_rejects_gap():
    with pytest.raises(MapError, match="surrounded by walls"):
        check_walls_enclosed(GameMap(["11111", "1PCE0", "11111"]))


def test_check_walls_enclosed_rejects_top_gap():
    with pytest.raises(MapError, match="surrounded by walls"):
        check_walls_enclosed(GameMap(["11011", "1PCE1", "11111"]))


def test_find_player_position():
    assert find_player_position(GameMap(VALID_ROWS)) == (1, 1)
    assert find_player_position(GameMap(["111", "101", "111"])) is None


def test_flood_fill_counts_and_marks():
    grid = [list(row) for row in VALID_ROWS]
    assert flood_fill(grid, 1, 1) == (1, 1)
    assert all(cell in ("1", "V") for row in grid for cell in row)


def test_flood_fill_stops_at_walls():
    grid = [list(row) for row in ["111111", "1P01C1", "1E0111", "111111"]]
    assert flood_fill(grid, 1, 1) == (0, 1)
    assert grid[1][4] == "C"


def test_flood_fill_on_wall_does_nothing():
    grid = [list(row) for row in VALID_ROWS]
    assert flood_fill(grid, 0, 0) == (0, 0)
    assert ["".join(row) for row in grid] == VALID_ROWS


def test_validate_paths_leaves_map_untouched():
    game_map = GameMap(VALID_ROWS)
    validate_paths(game_map)
    assert game_map.rows == VALID_ROWS


def test_validate_paths_unreachable_collectible():
    game_map = GameMap(["111111", "1P01C1", "1E0111", "111111"])
    with pytest.raises(MapError, match="0/1 reachable"):
        validate_paths(game_map)


def test_validate_paths_unreachable_exit():
    game_map = GameMap(["111111", "1PC1E1", "100111", "111111"])
    with pytest.raises(MapError, match="Exit is not reachable"):
        validate_paths(game_map)


def test_validate_paths_without_player():
    with pytest.raises(MapError, match="Player position not found"):
        validate_paths(GameMap(["11111", "10CE1", "11111"]))


def test_validate_map_valid_file(tmp_path):
    rows = ["11111111", "1P0C0C01", "10001E01", "11111111"]
    path = write_map(tmp_path, "\n".join(rows) + "\n")
    assert validate_map(read_map(path)) == 2


def test_validate_map_checks_characters_first():
    game_map = GameMap(["1111", "1PX1", "1111"])
    with pytest.raises(MapError, match="Invalid character"):
        validate_map(game_map)


def test_validate_map_reports_open_border():
    with pytest.raises(MapError, match="surrounded by walls"):
        validate_map(GameMap(["11111", "1PCE1", "10001", "11101"]))