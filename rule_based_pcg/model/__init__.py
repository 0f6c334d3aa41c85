"""Model package for rule-based map generation."""

from .grid import CellState, TileGrid
from .cellular import CellularAutomataPass, cellular_automata
from .agent import (AgentPosition, Direction, DrunkAgentParams,
                    DrunkAgentPass, StepTrace, WalkState, drunk_agent)
from .state import AgentSnapshot, GenerationState
from .engine import GenerationEngine

__all__ = [
    'CellState',
    'TileGrid',
    'CellularAutomataPass',
    'cellular_automata',
    'AgentPosition',
    'Direction',
    'DrunkAgentParams',
    'DrunkAgentPass',
    'StepTrace',
    'WalkState',
    'drunk_agent',
    'AgentSnapshot',
    'GenerationState',
    'GenerationEngine',
]
