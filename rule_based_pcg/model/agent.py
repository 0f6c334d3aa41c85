"""Drunk agent carving pass with ramping trigger probabilities."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .grid import CellState, TileGrid


class Direction(Enum):
    """Unit moves available to the agent, as (dx, dy) offsets."""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def random(cls, rng: np.random.Generator) -> "Direction":
        """Draw one of the four directions uniformly."""
        members = list(cls)
        return members[int(rng.integers(0, len(members)))]


@dataclass
class AgentPosition:
    """
    Agent cursor that survives across passes.

    Owned by the caller and updated in place by every DrunkAgentPass.apply.
    """
    x: int
    y: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)


@dataclass(frozen=True)
class DrunkAgentParams:
    """Parameters for one DrunkAgentPass invocation."""
    walks: int                     # J
    steps: int                     # I, steps per walk
    room_size_x: int
    room_size_y: int
    prob_generate_room: float
    prob_increase_room: float
    prob_change_direction: float
    prob_increase_change: float

    def validate(self) -> None:
        """Raise ValueError on negative counts, sizes or probabilities."""
        for name in ('walks', 'steps', 'room_size_x', 'room_size_y'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        for name in ('prob_generate_room', 'prob_increase_room',
                     'prob_change_direction', 'prob_increase_change'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")


@dataclass
class WalkState:
    """
    Transient state of a single pass invocation.

    Rebuilt from the base parameters every time the pass runs; nothing
    here carries over to the next invocation.
    """
    direction: Direction
    room_prob: float
    change_prob: float

    @classmethod
    def initial(cls, params: DrunkAgentParams,
                rng: np.random.Generator) -> "WalkState":
        return cls(
            direction=Direction.random(rng),
            room_prob=params.prob_generate_room,
            change_prob=params.prob_change_direction,
        )


@dataclass(frozen=True)
class StepTrace:
    """Record of one agent step, taken before the agent moves."""
    walk: int
    step: int
    x: int
    y: int
    direction: str        # direction used for the move attempt
    room_prob: float      # ramp value the room roll was compared against
    change_prob: float    # ramp value the direction roll was compared against
    room_carved: bool
    direction_changed: bool
    bounced: bool


class DrunkAgentPass:
    """
    Randomized carving walk.

    Per invocation the agent performs ``walks`` walks of ``steps`` steps.
    Each walk starts in a freshly drawn direction. Each step it:

    1. marks its cell with ``carve_state``
    2. rolls for a room; on failure the room probability ramps up
    3. rolls for a direction change; on failure that probability ramps up
    4. moves one cell, or picks a new random direction at the border
    """

    def __init__(self, carve_state: CellState = CellState.BLOCKED):
        self.carve_state = CellState(carve_state)

    def carve_room(self, grid: TileGrid, position: AgentPosition,
                   params: DrunkAgentParams) -> int:
        """
        Carve a room centered on the agent, clamped to the grid.

        ``room_size_x`` spans rows (the [0, H) axis) and ``room_size_y``
        spans columns (the [0, W) axis).
        """
        half_rows = params.room_size_x // 2
        half_cols = params.room_size_y // 2
        return grid.fill_rect(position.x - half_cols, position.y - half_rows,
                              position.x + half_cols, position.y + half_rows,
                              self.carve_state)

    def apply(self, grid: TileGrid, params: DrunkAgentParams,
              position: AgentPosition, rng: np.random.Generator,
              trace: Optional[List[StepTrace]] = None) -> TileGrid:
        """
        Run all walks on ``grid`` in place and return it.

        ``position`` is updated in place. When ``trace`` is given, one
        StepTrace per step is appended to it.
        """
        if not grid.in_bounds(position.x, position.y):
            raise ValueError(
                f"Agent position {position.as_tuple()} outside "
                f"{grid.width}x{grid.height} grid")

        state = WalkState.initial(params, rng)

        for walk in range(params.walks):
            # Each walk starts in a new direction; walk 0 uses the initial draw
            if walk > 0:
                state.direction = Direction.random(rng)

            for step in range(params.steps):
                grid.set(position.x, position.y, self.carve_state)

                rolled_room_prob = state.room_prob
                room_carved = bool(rng.random() < state.room_prob)
                if room_carved:
                    self.carve_room(grid, position, params)
                    state.room_prob = params.prob_generate_room
                else:
                    state.room_prob += params.prob_increase_room

                rolled_change_prob = state.change_prob
                direction_changed = bool(rng.random() < state.change_prob)
                if direction_changed:
                    state.direction = Direction.random(rng)
                    state.change_prob = params.prob_change_direction
                else:
                    state.change_prob += params.prob_increase_change

                moving = state.direction
                nx = position.x + moving.dx
                ny = position.y + moving.dy
                bounced = not grid.in_bounds(nx, ny)

                if trace is not None:
                    trace.append(StepTrace(
                        walk=walk,
                        step=step,
                        x=position.x,
                        y=position.y,
                        direction=moving.name,
                        room_prob=rolled_room_prob,
                        change_prob=rolled_change_prob,
                        room_carved=room_carved,
                        direction_changed=direction_changed,
                        bounced=bounced,
                    ))

                if bounced:
                    state.direction = Direction.random(rng)
                    state.change_prob = params.prob_change_direction
                else:
                    position.x = nx
                    position.y = ny

        return grid


def drunk_agent(grid: TileGrid, params: DrunkAgentParams,
                position: AgentPosition, rng: np.random.Generator,
                carve_state: CellState = CellState.BLOCKED) -> TileGrid:
    """Functional form of DrunkAgentPass.apply."""
    return DrunkAgentPass(carve_state).apply(grid, params, position, rng)
