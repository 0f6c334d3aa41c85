"""Configuration dataclasses and YAML loader for rule-based map generation."""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, Optional, Union, Sequence, Callable
from pathlib import Path
import yaml

IntRange = Tuple[int, int]
FloatRange = Tuple[float, float]


@dataclass
class GridConfig:
    width: int = 20
    height: int = 10
    fill_probability: float = 0.5   # chance of a BLOCKED cell in the initial fill


@dataclass
class CellularConfig:
    radius: int = 1        # R
    threshold: float = 0.5  # U (0.0-1.0)


@dataclass
class AgentRangesConfig:
    """Inclusive ranges the agent parameters are drawn from every iteration."""
    walks: IntRange = (3, 7)
    steps: IntRange = (5, 15)
    room_size_x: IntRange = (3, 7)
    room_size_y: IntRange = (2, 5)
    prob_generate_room: FloatRange = (0.05, 0.3)
    prob_increase_room: FloatRange = (0.01, 0.1)
    prob_change_direction: FloatRange = (0.05, 0.3)
    prob_increase_change: FloatRange = (0.01, 0.1)
    carve_value: int = 1
    start: Optional[Tuple[int, int]] = None  # (x, y); grid center when None


INT_RANGES = ('walks', 'steps', 'room_size_x', 'room_size_y')
FLOAT_RANGES = ('prob_generate_room', 'prob_increase_room',
                'prob_change_direction', 'prob_increase_change')


@dataclass
class SimulationConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    cellular: CellularConfig = field(default_factory=CellularConfig)
    agent: AgentRangesConfig = field(default_factory=AgentRangesConfig)
    iterations: int = 5

    # Export flags (can be overridden by CLI)
    ascii_enabled: bool = True
    csv_enabled: bool = False
    snapshot_enabled: bool = False
    gif_enabled: bool = False
    quiet: bool = False
    seed: Optional[int] = None
    out_dir: Path = field(default_factory=lambda: Path("./output"))

    def agent_start(self) -> Tuple[int, int]:
        """Initial agent (x, y): configured start or the grid center."""
        if self.agent.start is not None:
            return self.agent.start
        return (self.grid.width // 2, self.grid.height // 2)

    def validate(self) -> None:
        """Reject invalid settings before any grid is built."""
        if self.grid.width <= 0 or self.grid.height <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got "
                f"{self.grid.width}x{self.grid.height}")
        if not 0.0 <= self.grid.fill_probability <= 1.0:
            raise ValueError(
                f"fill_probability must be in [0, 1], got "
                f"{self.grid.fill_probability}")
        if self.cellular.radius < 0:
            raise ValueError(f"radius must be >= 0, got {self.cellular.radius}")
        if not 0.0 <= self.cellular.threshold <= 1.0:
            raise ValueError(
                f"threshold must be in [0, 1], got {self.cellular.threshold}")
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")

        for name in INT_RANGES + FLOAT_RANGES:
            lo, hi = getattr(self.agent, name)
            if lo > hi:
                raise ValueError(f"agent.{name} range is inverted: [{lo}, {hi}]")
            if lo < 0:
                raise ValueError(f"agent.{name} must be >= 0, got [{lo}, {hi}]")

        if self.agent.carve_value not in (0, 1):
            raise ValueError(
                f"agent.carve_value must be 0 or 1, got {self.agent.carve_value}")

        x, y = self.agent_start()
        if not (0 <= x < self.grid.width and 0 <= y < self.grid.height):
            raise ValueError(
                f"agent.start ({x}, {y}) outside "
                f"{self.grid.width}x{self.grid.height} grid")


def _whole_number(value: Any, name: str) -> int:
    """Convert to int, rejecting values with a fractional part."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"agent.{name} must be a whole number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"agent.{name} must be a whole number, got {value}")
    return int(value)


def _probability(value: Any, name: str) -> float:
    return float(value)


def _parse_range(value: Union[int, float, Sequence], name: str,
                 cast: Callable[[Any, str], Any]) -> Tuple:
    """Parse a [lo, hi] list or a scalar (fixed value) into a tuple."""
    if isinstance(value, (list, tuple)):
        if len(value) != 2:
            raise ValueError(f"agent.{name} must be a [min, max] pair, got {value}")
        return (cast(value[0], name), cast(value[1], name))
    return (cast(value, name), cast(value, name))


def _parse_agent(agent_raw: Dict[str, Any]) -> AgentRangesConfig:
    """Parse agent parameter ranges from raw YAML data."""
    defaults = AgentRangesConfig()
    kwargs: Dict[str, Any] = {}
    for name in INT_RANGES:
        if name in agent_raw:
            kwargs[name] = _parse_range(agent_raw[name], name, _whole_number)
    for name in FLOAT_RANGES:
        if name in agent_raw:
            kwargs[name] = _parse_range(agent_raw[name], name, _probability)

    start = agent_raw.get('start')
    if start is not None:
        start = (_whole_number(start[0], 'start'), _whole_number(start[1], 'start'))

    return AgentRangesConfig(
        carve_value=int(agent_raw.get('carve_value', defaults.carve_value)),
        start=start,
        **kwargs
    )


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    # Parse grid config
    grid_raw = raw.get('grid', {})
    grid_defaults = GridConfig()
    grid = GridConfig(
        width=grid_raw.get('width', grid_defaults.width),
        height=grid_raw.get('height', grid_defaults.height),
        fill_probability=grid_raw.get('fill_probability',
                                      grid_defaults.fill_probability)
    )

    # Parse cellular automata config
    ca_raw = raw.get('cellular', {})
    ca_defaults = CellularConfig()
    cellular = CellularConfig(
        radius=ca_raw.get('radius', ca_defaults.radius),
        threshold=ca_raw.get('threshold', ca_defaults.threshold)
    )

    agent = _parse_agent(raw.get('agent', {}))

    # Parse simulation config
    sim_raw = raw.get('simulation', {})

    # Parse export config (optional)
    export_raw = raw.get('export', {})

    config = SimulationConfig(
        grid=grid,
        cellular=cellular,
        agent=agent,
        iterations=sim_raw.get('iterations', 5),
        seed=sim_raw.get('seed'),
        ascii_enabled=export_raw.get('ascii', True),
        csv_enabled=export_raw.get('csv', False),
        snapshot_enabled=export_raw.get('snapshot', False),
        gif_enabled=export_raw.get('gif', False)
    )
    config.validate()
    return config
