"""Visualization and export for rule-based map generation."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from pathlib import Path
from typing import List, TYPE_CHECKING
from PIL import Image
import io

from ..model.grid import CellState

if TYPE_CHECKING:
    from ..model.state import GenerationState


class Visualizer:
    """
    Generates visual outputs using matplotlib.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    # Color scheme
    COLORS = {
        'blocked': '#2C3E50',   # Dark blue-gray
        'open': '#ECF0F1',      # Light gray
        'agent': '#E74C3C',     # Red
        'trail': '#F39C12',     # Orange
    }

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.frames: List[Image.Image] = []

    def _create_figure(self, state: "GenerationState",
                       show_trail: bool = True) -> plt.Figure:
        """Create matplotlib figure for state visualization."""
        # Determine figure size based on grid aspect ratio
        aspect = self.width / self.height
        fig_height = 6
        fig_width = max(8, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        base = np.ones((self.height, self.width, 3))
        base[:, :] = to_rgb(self.COLORS['open'])
        base[state.grid.cells == CellState.BLOCKED] = to_rgb(self.COLORS['blocked'])

        # Row 0 at the top, matching the text rendering
        ax.imshow(base, origin='upper', aspect='equal',
                  extent=[-0.5, self.width - 0.5, self.height - 0.5, -0.5])

        # Agent path for this iteration
        if show_trail and state.trace:
            xs = [t.x for t in state.trace] + [state.agent.x]
            ys = [t.y for t in state.trace] + [state.agent.y]
            ax.plot(xs, ys, '-', color=self.COLORS['trail'],
                    linewidth=1.0, alpha=0.7)

        ax.plot(state.agent.x, state.agent.y, 'o', color=self.COLORS['agent'],
                markersize=7, markeredgecolor='white', markeredgewidth=0.5)

        ax.set_title(f'Iteration {state.iteration} | '
                     f'Open: {state.metrics.get("open_ratio", 0):.1%}')
        ax.set_xlabel('X')
        ax.set_ylabel('Y')
        ax.set_xlim(-0.5, self.width - 0.5)
        ax.set_ylim(self.height - 0.5, -0.5)

        plt.tight_layout()
        return fig

    def buffer_frame(self, state: "GenerationState") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(state)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, state: "GenerationState", output_path: Path) -> None:
        """Save single PNG image of current state."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 2) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        """Clear buffered frames."""
        self.frames.clear()
