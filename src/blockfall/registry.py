"""
Block Registry - Verwaltet alle lebenden Blöcke

Ermöglicht:
- Advance: alle Blöcke um einen festen Schritt nach unten bewegen
- Cull: Blöcke entfernen, die das Grid unten verlassen haben
- Spawn: neue Gruppe von Blöcken in einer Spalte erzeugen
- Column Guard: Spawn verhindern, solange die letzte Gruppe noch oben steht
"""

from typing import Callable, List, Optional, Tuple

from .block import Block, BlockView, Color
from .constants import ROWS, GROUP_SIZE, SPAWN_OFFSET, ROW_PRECISION
from .logger import get_logger

logger = get_logger(__name__)


class BlockRegistry:
    """Einziger Besitzer der mutable Block-Liste (Reihenfolge = Einfüge-Reihenfolge)."""

    def __init__(
        self,
        rows: int = ROWS,
        group_size: int = GROUP_SIZE,
        spawn_offset: int = SPAWN_OFFSET,
        block_threshold: Optional[float] = None
    ):
        """
        Initialisiert die Registry.

        Args:
            rows: Anzahl Grid-Zeilen (Cull-Grenze)
            group_size: Blöcke pro Gruppe
            spawn_offset: Startzeile des ersten Blocks einer Gruppe
            block_threshold: Zeile, unter der eine Spalte als belegt gilt (None = group_size)
        """
        self.rows = rows
        self.group_size = group_size
        self.spawn_offset = spawn_offset
        self.block_threshold = group_size if block_threshold is None else block_threshold
        self._blocks: List[Block] = []

    def advance(self, delta_rows: float) -> Tuple[BlockView, ...]:
        """
        Bewegt alle Blöcke um delta_rows nach unten.

        Args:
            delta_rows: Fester Schritt pro Frame (nicht zeitskaliert)

        Returns:
            Snapshot nach dem Schritt
        """
        for block in self._blocks:
            block.row += delta_rows
        return self.snapshot()

    @staticmethod
    def _settled_row(row: float) -> float:
        """Zeile für Vergleiche, Float-Drift weggerundet (300 × 0.05 → 15.0)."""
        return round(row, ROW_PRECISION)

    def cull(self) -> Tuple[BlockView, ...]:
        """
        Entfernt alle Blöcke mit row >= rows (Reihenfolge bleibt erhalten).

        Returns:
            Snapshot der verbleibenden Blöcke
        """
        before = len(self._blocks)
        self._blocks = [
            block for block in self._blocks
            if self._settled_row(block.row) < self.rows
        ]
        removed = before - len(self._blocks)
        if removed:
            logger.debug(f"Cull: {removed} Blöcke entfernt, {len(self._blocks)} aktiv")
        return self.snapshot()

    def spawn_group(self, column: int, color: Color) -> Tuple[BlockView, ...]:
        """
        Erzeugt eine Gruppe von group_size Blöcken in einer Spalte.
        Zeile des i-ten Blocks: spawn_offset - i

        Args:
            column: Ziel-Spalte (muss gültig sein)
            color: Gemeinsame Farbe der Gruppe

        Returns:
            Snapshot der neu erzeugten Blöcke
        """
        group = [
            Block(column=column, row=float(self.spawn_offset - i), color=color)
            for i in range(self.group_size)
        ]
        self._blocks.extend(group)
        logger.debug(f"Gruppe gespawnt: Spalte {column}, Farbe {color}")
        return tuple(block.view() for block in group)

    def is_column_blocked(self, column: int) -> bool:
        """True wenn ein Block dieser Spalte noch oberhalb von block_threshold steht."""
        return any(
            block.column == column and self._settled_row(block.row) < self.block_threshold
            for block in self._blocks
        )

    def try_spawn(self, column: int, pick_color: Callable[[], Color]) -> bool:
        """
        Spawnt nur, wenn die Spalte frei ist.

        Args:
            column: Ziel-Spalte
            pick_color: Liefert die Gruppenfarbe, wird nur bei erfolgreichem Spawn aufgerufen

        Returns:
            True wenn eine Gruppe erzeugt wurde, False wenn die Spalte belegt war
        """
        if self.is_column_blocked(column):
            logger.debug(f"Spawn verworfen: Spalte {column} belegt")
            return False
        self.spawn_group(column, pick_color())
        return True

    def snapshot(self) -> Tuple[BlockView, ...]:
        """Read-only Kopie aller lebenden Blöcke."""
        return tuple(block.view() for block in self._blocks)

    def clear(self):
        self._blocks.clear()

    def __len__(self):
        return len(self._blocks)

    def __iter__(self):
        return iter(self.snapshot())

    def __repr__(self):
        return f"<BlockRegistry blocks={len(self._blocks)} rows={self.rows} group_size={self.group_size}>"
