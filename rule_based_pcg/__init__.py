"""Rule-based procedural map generation: cellular automata and drunk agent passes."""

__version__ = "0.1.0"
