"""Plain-text rendering of tile grids."""

import sys
from typing import TextIO, Optional, TYPE_CHECKING

from ..model.grid import CellState, TileGrid

if TYPE_CHECKING:
    from ..model.state import GenerationState


def render_ascii(grid: TileGrid, blocked_char: str = '#', open_char: str = '.') -> str:
    """Render one character per cell, one line per row."""
    glyphs = {CellState.BLOCKED: blocked_char, CellState.OPEN: open_char}
    return "\n".join(
        "".join(glyphs[CellState(v)] for v in row)
        for row in grid.to_rows()
    )


class ConsoleRenderer:
    """Prints each generated map with a header line."""

    def __init__(self, stream: Optional[TextIO] = None,
                 blocked_char: str = '#', open_char: str = '.'):
        self.stream = stream if stream is not None else sys.stdout
        self.blocked_char = blocked_char
        self.open_char = open_char

    def render(self, state: "GenerationState") -> None:
        if state.iteration == 0:
            header = "--- Initial map ---"
        else:
            header = f"--- Iteration {state.iteration} ---"
        print(header, file=self.stream)
        print(render_ascii(state.grid, self.blocked_char, self.open_char), file=self.stream)

    __call__ = render
