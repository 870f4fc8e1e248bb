"""
Puzzle parsing utilities for cubewalk.

The puzzle text has two blocks separated by a blank line:
1. The net, one grid row per line ('.' open, '#' wall, anything else void)
2. A single line of moves alternating distances and L/R turns
"""

from __future__ import annotations

from net_types import Cell, Grid, Instruction, Turn

__all__ = ["format_instructions", "parse_grid", "parse_instructions", "parse_puzzle"]


def parse_grid(text: str) -> Grid:
    """
    Parse the net block into a rectangular Grid.

    Source rows may have differing lengths (trailing spaces are usually
    trimmed), so every row is right-padded with VOID to the longest row.

    Example:
        "  .#\\n...."
        Creates a 2x4 grid whose first row is [VOID, VOID, OPEN, WALL].

    Args:
        text: Net rows separated by newlines

    Returns:
        Grid with uniform row width

    Raises:
        ValueError: If the text holds no rows or no non-void cell
    """
    lines = text.replace("\r\n", "\n").split("\n")
    # Only empty trailing lines are dropped; rows of padding are real void rows
    while lines and lines[-1] == "":
        lines.pop()

    if not lines:
        raise ValueError("Empty net: expected at least one row of '.', '#' or padding")

    width = max(len(line) for line in lines)
    rows = tuple(
        tuple(Cell.from_char(char) for char in line.ljust(width)) for line in lines
    )

    if all(cell is Cell.VOID for row in rows for cell in row):
        error_msg = (
            f"Net has no open or wall cells\n"
            f"  Rows: {len(rows)}, width: {width}\n"
            f"  Valid cells:\n"
            f"    - '.': open floor\n"
            f"    - '#': wall\n"
            f"    - anything else: void padding"
        )
        raise ValueError(error_msg)

    return Grid(rows)


def parse_instructions(text: str) -> list[Instruction]:
    """
    Parse a move line such as "10R5L5R10L4R5L5".

    The line starts with a distance (the leading instruction has no turn);
    each following 'L' or 'R' turns in place and is followed by its distance.

    Args:
        text: The move line (surrounding whitespace is ignored)

    Returns:
        Instructions in order

    Raises:
        ValueError: On any character other than digits, 'L' and 'R', or a
            turn letter with no distance after it
    """
    moves = text.strip()
    if not moves:
        raise ValueError("Empty move list: expected something like '10R5L5'")

    instructions: list[Instruction] = []
    turn: Turn | None = None
    digits = ""

    for col, char in enumerate(moves):
        if char.isdigit():
            digits += char
        elif char in ("L", "R"):
            if not digits:
                raise ValueError(_move_error(moves, col, "turn letter without a distance before it"))
            instructions.append(Instruction(turn, int(digits)))
            turn = Turn(char)
            digits = ""
        else:
            raise ValueError(_move_error(moves, col, f"unexpected character {char!r}"))

    if not digits:
        raise ValueError(_move_error(moves, len(moves) - 1, "move list ends with a turn letter"))
    instructions.append(Instruction(turn, int(digits)))

    return instructions


def _move_error(moves: str, col: int, problem: str) -> str:
    return (
        f"Invalid move list: {problem}\n"
        f"  Moves: \"{moves}\"\n"
        f"  Position: column {col}\n"
        f"          {' ' * col}^\n"
        f"  Valid format: distance, then any number of L/R + distance (e.g. '10R5L5')"
    )


def parse_puzzle(text: str) -> tuple[Grid, list[Instruction]]:
    """
    Parse a whole puzzle into its net and move list.

    Raises:
        ValueError: If the blank line separating the two blocks is missing
    """
    net, sep, moves = text.replace("\r\n", "\n").partition("\n\n")
    if not sep:
        raise ValueError(
            "Puzzle must contain the net, a blank line, then the move list"
        )
    return parse_grid(net), parse_instructions(moves)


def format_instructions(instructions: list[Instruction]) -> str:
    """Render instructions back into the move-line format."""
    parts: list[str] = []
    for instruction in instructions:
        if instruction.turn is not None:
            parts.append(instruction.turn.value)
        parts.append(str(instruction.distance))
    return "".join(parts)
