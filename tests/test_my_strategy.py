import pytest

from drillbook.my_strategy import MyStrategy, create_strategy

ROWS = [[(r, c) for c in range(3)] for r in range(3)]
COLS = [[(r, c) for r in range(3)] for c in range(3)]
DIAGS = [[(0, 0), (1, 1), (2, 2)], [(0, 2), (1, 1), (2, 0)]]


def _line_cases():
    for finder, lines in (("check_rows", ROWS), ("check_cols", COLS), ("check_diags", DIAGS)):
        for line in lines:
            for missing in line:
                yield finder, line, missing


def _x_player():
    strategy = MyStrategy()
    strategy.init(0)
    return strategy


def _o_player():
    strategy = MyStrategy()
    strategy.init(1)
    return strategy


def test_created_strategy_opens_in_the_centre():
    strategy = create_strategy()
    strategy.init(0)
    assert strategy.make_move() == (1, 1)


def test_o_takes_free_centre():
    assert _o_player().make_move() == (1, 1)


def test_o_takes_corner_when_centre_is_taken():
    strategy = _o_player()
    strategy.opponent_move((1, 1))
    assert strategy.make_move() == (0, 0)


def test_x_second_move_avoids_opponent_corner():
    strategy = _x_player()
    strategy.make_move()
    strategy.opponent_move((0, 0))
    assert strategy.make_move() == (0, 2)


def test_x_second_move_takes_corner_when_free():
    strategy = _x_player()
    strategy.make_move()
    strategy.opponent_move((0, 1))
    assert strategy.make_move() == (0, 0)


def test_o_second_move_without_threat_and_top_free():
    strategy = _o_player()
    strategy.opponent_move((0, 0))
    strategy.make_move()
    strategy.opponent_move((2, 2))
    assert strategy.make_move() == (0, 1)


def test_o_second_move_without_threat_and_top_taken():
    strategy = _o_player()
    strategy.opponent_move((0, 1))
    strategy.make_move()
    strategy.opponent_move((2, 2))
    assert strategy.make_move() == (1, 0)


def test_o_second_move_blocks_row():
    strategy = _o_player()
    strategy.opponent_move((0, 0))
    strategy.make_move()
    strategy.opponent_move((0, 1))
    assert strategy.make_move() == (0, 2)


def test_x_completes_its_diagonal():
    strategy = _x_player()
    strategy.make_move()
    strategy.opponent_move((0, 0))
    strategy.make_move()
    strategy.opponent_move((2, 2))
    assert strategy.make_move() == (2, 0)


@pytest.mark.parametrize("finder", ["check_rows", "check_cols", "check_diags"])
def test_empty_board_has_no_open_line(finder):
    assert getattr(_x_player(), finder)("O", "X") is None


@pytest.mark.parametrize("finder,line,missing", list(_line_cases()))
def test_finder_returns_the_gap_of_a_pair(finder, line, missing):
    strategy = _x_player()
    for cell in line:
        if cell != missing:
            strategy.opponent_move(cell)
    assert getattr(strategy, finder)("O", "X") == missing


def test_blocked_row_is_not_reported():
    strategy = _o_player()
    strategy.opponent_move((1, 1))
    assert strategy.make_move() == (0, 0)
    strategy.opponent_move((0, 1))
    strategy.opponent_move((0, 2))
    assert strategy.check_rows("X", "O") is None


def test_count_ways_on_empty_board():
    assert _x_player().count_ways("X", "O") == 0


def test_two_win_ways_on_empty_board():
    assert _x_player().two_win_ways("X", "O") is None


def test_two_win_ways_leaves_board_unchanged_and_suggests_a_double_threat():
    strategy = _x_player()
    strategy.opponent_move((0, 0))
    before = strategy.count_ways("O", "X")
    cell = strategy.two_win_ways("O", "X")
    assert strategy.count_ways("O", "X") == before
    assert cell is not None and cell != (0, 0)
    strategy.opponent_move(cell)
    assert strategy.count_ways("O", "X") > 1


def test_init_resets_the_board():
    strategy = _x_player()
    strategy.opponent_move((0, 0))
    strategy.opponent_move((0, 1))
    strategy.init(0)
    assert strategy.check_rows("O", "X") is None