"""Tests for net_parser module."""

import pytest

from cubewalk import EXAMPLE_MOVES, EXAMPLE_PUZZLE
from net_parser import format_instructions, parse_grid, parse_instructions, parse_puzzle
from net_types import Cell, Instruction, Turn


class TestParseGrid:
    """Tests for the net parser."""

    def test_pads_short_rows(self) -> None:
        """Rows shorter than the widest are padded with void."""
        grid = parse_grid("  .#\n....\n .")
        assert grid.width == 4
        assert grid.height == 3
        assert grid.cells[0] == (Cell.VOID, Cell.VOID, Cell.OPEN, Cell.WALL)
        assert grid.cells[2] == (Cell.VOID, Cell.OPEN, Cell.VOID, Cell.VOID)

    def test_other_characters_are_void(self) -> None:
        """Anything that is not '.' or '#' counts as padding."""
        grid = parse_grid("x.\n.~")
        assert grid.cells[0][0] is Cell.VOID
        assert grid.cells[1][1] is Cell.VOID

    def test_drops_trailing_empty_lines(self) -> None:
        """Empty lines after the net are not rows."""
        grid = parse_grid("..\n..\n\n")
        assert grid.height == 2

    def test_keeps_rows_of_padding(self) -> None:
        """A row of spaces above the net is a void row and shifts every y."""
        grid = parse_grid("    \n  ..\n....")
        assert grid.height == 3
        assert grid.row_bounds[0] is None
        assert grid.row_bounds[1] == (2, 3)

    def test_keeps_leading_indent(self) -> None:
        """Leading spaces position the first face."""
        grid = parse_grid("   ..\n.....")
        assert grid.row_bounds[0] == (3, 4)

    def test_empty_rejected(self) -> None:
        """An empty net is an error."""
        with pytest.raises(ValueError, match="Empty net"):
            parse_grid("\n\n")

    def test_all_void_rejected(self) -> None:
        """A net of padding only is an error."""
        with pytest.raises(ValueError, match="no open or wall cells"):
            parse_grid("xx\n yy")


class TestParseInstructions:
    """Tests for the move-line parser."""

    def test_example_moves(self) -> None:
        """The example line alternates distances and turns."""
        instructions = parse_instructions(EXAMPLE_MOVES)
        assert instructions[0] == Instruction(None, 10)
        assert instructions[1] == Instruction(Turn.RIGHT, 5)
        assert instructions[2] == Instruction(Turn.LEFT, 5)
        assert [i.distance for i in instructions] == [10, 5, 5, 10, 4, 5, 5]

    def test_multi_digit_and_zero(self) -> None:
        """Distances can be long or zero."""
        assert parse_instructions("0L120\n") == [
            Instruction(None, 0),
            Instruction(Turn.LEFT, 120),
        ]

    def test_round_trip_format(self) -> None:
        """Formatting gives back the original line."""
        assert format_instructions(parse_instructions(EXAMPLE_MOVES)) == EXAMPLE_MOVES

    def test_bad_character(self) -> None:
        """Unknown letters are reported with their column."""
        with pytest.raises(ValueError, match="unexpected character 'X'") as excinfo:
            parse_instructions("10X5")
        assert "column 2" in str(excinfo.value)

    def test_leading_turn(self) -> None:
        """The line must start with a distance."""
        with pytest.raises(ValueError, match="without a distance"):
            parse_instructions("R10")

    def test_doubled_turn(self) -> None:
        """Two turn letters in a row leave the second without a distance."""
        with pytest.raises(ValueError, match="without a distance"):
            parse_instructions("10RL5")

    def test_trailing_turn(self) -> None:
        """A trailing turn has no distance to walk."""
        with pytest.raises(ValueError, match="ends with a turn"):
            parse_instructions("10R")

    def test_empty(self) -> None:
        """An empty move line is an error."""
        with pytest.raises(ValueError, match="Empty move list"):
            parse_instructions("  ")


class TestParsePuzzle:
    """Tests for splitting a whole puzzle."""

    def test_example_puzzle(self) -> None:
        """The bundled example parses into its net and moves."""
        grid, instructions = parse_puzzle(EXAMPLE_PUZZLE)
        assert (grid.width, grid.height) == (16, 12)
        assert len(instructions) == 7

    def test_missing_separator(self) -> None:
        """Without the blank line the moves cannot be found."""
        with pytest.raises(ValueError, match="blank line"):
            parse_puzzle("..\n..\n10R5")

    def test_leading_void_row_kept(self) -> None:
        """A padding row above the example moves the whole net down one row."""
        grid, _ = parse_puzzle(" " * 12 + "\n" + EXAMPLE_PUZZLE)
        assert grid.height == 13
        assert grid.row_bounds[0] is None
        assert grid.row_bounds[1] == (8, 11)

    def test_crlf_line_endings(self) -> None:
        """Windows line endings parse the same as plain newlines."""
        grid, instructions = parse_puzzle(EXAMPLE_PUZZLE.replace("\n", "\r\n"))
        assert grid == parse_puzzle(EXAMPLE_PUZZLE)[0]
        assert format_instructions(instructions) == EXAMPLE_MOVES
