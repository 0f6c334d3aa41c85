"""Generation engine: drives the smoothing and carving passes."""

import logging
import numpy as np
from typing import List, Callable, Optional, Dict, TYPE_CHECKING

from .grid import CellState, TileGrid
from .cellular import CellularAutomataPass
from .agent import AgentPosition, DrunkAgentParams, DrunkAgentPass, StepTrace
from .state import GenerationState, AgentSnapshot

if TYPE_CHECKING:
    from ..config import SimulationConfig

logger = logging.getLogger(__name__)

MapReadyHook = Callable[[GenerationState], None]


class GenerationEngine:
    """
    Orchestrates the iteration loop.

    Each iteration:
    1. Draw fresh agent parameters from the configured ranges
    2. Smooth the grid with the cellular automata pass
    3. Carve on top of it with the drunk agent pass
    4. Return a state snapshot

    The grid and the agent position persist across iterations; the agent's
    direction and probability ramps do not.
    """

    def __init__(self, config: "SimulationConfig",
                 rng: Optional[np.random.Generator] = None):
        config.validate()
        self.config = config
        self.current_iteration = 0
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

        # Initialize grid
        self.grid = TileGrid.random(
            config.grid.width, config.grid.height, self.rng,
            config.grid.fill_probability
        )

        start_x, start_y = config.agent_start()
        self.position = AgentPosition(start_x, start_y)

        self.cellular = CellularAutomataPass(
            config.cellular.radius, config.cellular.threshold
        )
        self.agent = DrunkAgentPass(CellState(config.agent.carve_value))

        logger.debug("Initialized %dx%d grid, agent at %s",
                     config.grid.width, config.grid.height,
                     self.position.as_tuple())

    def sample_params(self) -> DrunkAgentParams:
        """Draw agent parameters; integer ranges are inclusive."""
        ranges = self.config.agent

        def draw_int(bounds):
            return int(self.rng.integers(bounds[0], bounds[1] + 1))

        def draw_float(bounds):
            return float(self.rng.uniform(bounds[0], bounds[1]))

        return DrunkAgentParams(
            walks=draw_int(ranges.walks),
            steps=draw_int(ranges.steps),
            room_size_x=draw_int(ranges.room_size_x),
            room_size_y=draw_int(ranges.room_size_y),
            prob_generate_room=draw_float(ranges.prob_generate_room),
            prob_increase_room=draw_float(ranges.prob_increase_room),
            prob_change_direction=draw_float(ranges.prob_change_direction),
            prob_increase_change=draw_float(ranges.prob_increase_change),
        )

    def initial_state(self) -> GenerationState:
        """Snapshot of the random fill before any pass has run."""
        return GenerationState(
            iteration=0,
            grid=self.grid.copy(),
            smoothed=None,
            params=None,
            agent=AgentSnapshot(self.position.x, self.position.y),
            metrics=self._grid_metrics(self.grid),
        )

    def step(self) -> GenerationState:
        """Execute one iteration: smooth first, then carve."""
        self.current_iteration += 1

        params = self.sample_params()
        params.validate()

        self.cellular.apply(self.grid)
        smoothed = self.grid.copy()

        trace: List[StepTrace] = []
        self.agent.apply(self.grid, params, self.position, self.rng, trace)

        logger.debug("Iteration %d: %s, agent now at %s",
                     self.current_iteration, params,
                     self.position.as_tuple())

        return self._create_state_snapshot(params, smoothed, trace)

    def run(self, on_map_ready: Optional[MapReadyHook] = None) -> List[GenerationState]:
        """Run all remaining iterations, calling ``on_map_ready`` after each."""
        states = []
        while not self.is_finished():
            state = self.step()
            if on_map_ready is not None:
                on_map_ready(state)
            states.append(state)
        return states

    def _grid_metrics(self, grid: TileGrid) -> Dict[str, float]:
        open_ratio = grid.open_ratio()
        return {
            'open_ratio': open_ratio,
            'blocked_ratio': 1.0 - open_ratio,
        }

    def _create_state_snapshot(self, params: DrunkAgentParams,
                               smoothed: TileGrid,
                               trace: List[StepTrace]) -> GenerationState:
        """Create snapshot of current generator state."""
        metrics = self._grid_metrics(self.grid)
        metrics.update({
            'rooms_carved': sum(1 for t in trace if t.room_carved),
            'direction_changes': sum(1 for t in trace if t.direction_changed),
            'bounces': sum(1 for t in trace if t.bounced),
        })

        return GenerationState(
            iteration=self.current_iteration,
            grid=self.grid.copy(),
            smoothed=smoothed,
            params=params,
            agent=AgentSnapshot(self.position.x, self.position.y),
            metrics=metrics,
            trace=trace,
        )

    def is_finished(self) -> bool:
        """Check if all configured iterations have run."""
        return self.current_iteration >= self.config.iterations

    def get_summary(self) -> Dict:
        """Get summary statistics for the run so far."""
        return {
            'iterations': self.current_iteration,
            'open_ratio': self.grid.open_ratio(),
            'agent_position': self.position.as_tuple(),
        }
