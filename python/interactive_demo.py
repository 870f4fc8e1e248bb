"""
Interactive demo for cubewalk.
Display the net and step through the folded walk with keyboard commands.
"""

import logging

import readchar, sys
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import path_visits, render_net
from cubewalk import (
    EXAMPLE_MOVES,
    EXAMPLE_NET,
    STAIRS_NET,
    build_portals,
    cube_wrap,
    score,
    start_state,
    trace,
)
from net_parser import parse_puzzle
from net_types import AgentState, Grid, Instruction


class InteractiveDemo:
    """Step-through viewer for a cube walk."""

    def __init__(self, grid: Grid, instructions: list[Instruction]) -> None:
        self.grid = grid
        self.portals = build_portals(grid)
        self.states: list[AgentState] = list(
            trace(grid, cube_wrap(self.portals), start_state(grid), instructions)
        )
        self.index = 0
        self.console = Console()
        self.status_message = "Ready"

    @property
    def current(self) -> AgentState:
        return self.states[self.index]

    def generate_display(self) -> Panel:
        """Generate the current display with net and status."""
        state = self.current
        net_text = render_net(
            self.grid,
            path_visits(self.states[: self.index]),
            highlight=state,
        )

        status = Text()
        status.append("Position: ", style="bold")
        status.append(f"({state.position.x}, {state.position.y}) facing {state.facing.name}\n")
        status.append("Step: ", style="bold")
        status.append(f"{self.index} / {len(self.states) - 1}\n")
        status.append("Password: ", style="bold")
        status.append(f"{score(state)}\n\n")

        # Convert ANSI-colored net text to Rich Text properly
        status.append(Text.from_ansi(net_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  N - Next step\n")
        status.append("  B - Back one step\n")
        status.append("  E - Jump to end\n")
        status.append("  R - Reset to start\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Cubewalk Interactive Demo", border_style="green", width=80)

    def crossed_seam(self, earlier: AgentState, later: AgentState) -> bool:
        """Whether one step of the walk went through a portal."""
        return self.portals.get((earlier.position, earlier.facing)) == later

    def move(self, delta: int) -> None:
        """Move along the recorded walk, clamped to its ends."""
        target = min(max(self.index + delta, 0), len(self.states) - 1)
        if target == self.index:
            self.status_message = "Already at the " + ("end" if delta > 0 else "start")
            return

        before = self.current
        self.index = target
        after = self.current
        earlier, later = (before, after) if delta > 0 else (after, before)
        if abs(delta) == 1 and self.crossed_seam(earlier, later):
            self.status_message = "✓ Crossed a seam"
        else:
            self.status_message = f"✓ Step {self.index}"

    def run(self) -> None:
        """Run the interactive demo."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey()

                    if key.lower() == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key.lower() == 'n':
                        self.move(1)
                    elif key.lower() == 'b':
                        self.move(-1)
                    elif key.lower() == 'e':
                        self.move(len(self.states))
                    elif key.lower() == 'r':
                        self.index = 0
                        self.status_message = "Reset to start"
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


LAYOUTS = dict(
    example=f"{EXAMPLE_NET}\n\n{EXAMPLE_MOVES}",
    stairs=f"{STAIRS_NET}\n\n5R12L3R20L7R9L30",
)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    arg = sys.argv[1] if len(sys.argv) > 1 else 'example'
    if arg in LAYOUTS:
        text = LAYOUTS[arg]
    else:
        with open(arg) as f:
            text = f.read()

    grid, instructions = parse_puzzle(text)
    InteractiveDemo(grid, instructions).run()
