"""CSV export of per-iteration parameters and metrics."""

import csv
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.state import GenerationState


FIELDNAMES = [
    'iteration', 'agent_x', 'agent_y',
    'walks', 'steps', 'room_size_x', 'room_size_y',
    'prob_generate_room', 'prob_increase_room',
    'prob_change_direction', 'prob_increase_change',
    'open_ratio', 'blocked_ratio',
    'rooms_carved', 'direction_changes', 'bounces',
]


class CSVWriter:
    """
    Exports one row per iteration incrementally.

    Output format:
        iteration,agent_x,agent_y,walks,steps,...,bounces
        1,10,5,4,12,...,2
        ...
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self._is_open = False

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=FIELDNAMES,
                                     extrasaction='ignore')
        self.writer.writeheader()
        self._is_open = True

    def append(self, state: "GenerationState") -> None:
        """Write the row for one iteration."""
        if state.params is None:
            return  # initial fill has no parameters
        if not self._is_open:
            self.open()
        self.writer.writerow(state.to_csv_row())
        self.file.flush()

    def close(self) -> None:
        """Close file handle."""
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
