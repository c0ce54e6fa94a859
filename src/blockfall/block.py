"""
Block Data Models

- Block: Ein fallender Block (mutable row, gehört der Registry)
- BlockView: Read-only Snapshot für Render-Sinks
"""

from dataclasses import dataclass
from typing import Tuple

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class BlockView:
    """Read-only Snapshot eines Blocks"""
    column: int
    row: float
    color: Color


@dataclass
class Block:
    """Einzelner fallender Block"""
    column: int      # Grid-Spalte, ändert sich nie
    row: float       # Vertikale Position in Zeilen (darf negativ sein)
    color: Color     # Farbe aus der Palette

    def view(self) -> BlockView:
        return BlockView(self.column, self.row, self.color)
