"""I/O package for rule-based map generation."""

from .console import ConsoleRenderer, render_ascii
from .csv_writer import CSVWriter
from .visualizer import Visualizer
from .reporter import Reporter

__all__ = ['ConsoleRenderer', 'render_ascii', 'CSVWriter', 'Visualizer', 'Reporter']
