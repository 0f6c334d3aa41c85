"""Summary report generation for rule-based map generation."""

from typing import List, Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.state import GenerationState


class Reporter:
    """Generates summary statistics and formatted text report."""

    def __init__(self, config_path: Optional[str], seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.iteration_metrics: List[Dict] = []
        self.total_rooms = 0
        self.total_bounces = 0
        self.total_steps = 0

    def update(self, state: "GenerationState") -> None:
        """Accumulate metrics per iteration."""
        self.iteration_metrics.append(state.metrics.copy())
        self.total_rooms += int(state.metrics.get('rooms_carved', 0))
        self.total_bounces += int(state.metrics.get('bounces', 0))
        self.total_steps += len(state.trace)

    def generate_summary(self, final_state: "GenerationState",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        open_ratio = final_state.metrics.get('open_ratio', 0)
        grid = final_state.grid

        lines = [
            "",
            "=" * 80,
            "                    RULE-BASED MAP GENERATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path or '(defaults)'}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "GENERATION METRICS",
            "-" * 40,
            f"Grid:                  {grid.width}x{grid.height}",
            f"Iterations:            {final_state.iteration}",
            f"Agent Steps:           {self.total_steps}",
            f"Rooms Carved:          {self.total_rooms}",
            f"Border Bounces:        {self.total_bounces}",
            f"Final Agent Position:  ({final_state.agent.x}, {final_state.agent.y})",
            f"Final Open Ratio:      {open_ratio:.1%}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        # Output file paths
        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'generation_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_map.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'generation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
