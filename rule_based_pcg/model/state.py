"""State snapshot dataclasses for rule-based map generation."""

from dataclasses import dataclass, field, asdict
from typing import List, Dict, Optional

from .grid import TileGrid
from .agent import DrunkAgentParams, StepTrace


@dataclass(frozen=True)
class AgentSnapshot:
    """Immutable snapshot of the agent position after an iteration."""
    x: int
    y: int


@dataclass
class GenerationState:
    """Complete snapshot of the generator after one iteration."""
    iteration: int
    grid: TileGrid                      # Copy of the grid after carving
    smoothed: Optional[TileGrid]        # Copy of the grid after smoothing
    params: Optional[DrunkAgentParams]  # Agent parameters drawn this iteration
    agent: AgentSnapshot
    metrics: Dict[str, float]           # open_ratio, rooms_carved, etc.
    trace: List[StepTrace] = field(default_factory=list)

    def to_csv_row(self) -> Dict:
        """Flatten iteration, parameters and metrics into one CSV row."""
        row: Dict = {
            "iteration": self.iteration,
            "agent_x": self.agent.x,
            "agent_y": self.agent.y,
        }
        if self.params is not None:
            row.update(asdict(self.params))
        row.update(self.metrics)
        return row
