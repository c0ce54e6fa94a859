"""
Frame Renderer - Rastert Block-Snapshots in NumPy Frames (BGR)

Zeichnet das Grid (Hintergrund + leere Zellen) einmalig in einen Cache und
blendet pro Frame alle Blöcke mit Fade-Out am unteren Rand darüber.
"""
from typing import Iterable, Tuple

import cv2
import numpy as np

from .block import BlockView
from .constants import (
    ROWS,
    COLS,
    CELL_SIZE,
    GROUP_SIZE,
    GRID_BACKGROUND,
    EMPTY_CELL_COLOR,
    BLOCK_BORDER_COLOR,
    BLOCK_GLOW_COLOR,
    CELL_CORNER_RADIUS
)
from .logger import get_logger

logger = get_logger(__name__)


def rgb_to_bgr(color) -> Tuple[int, int, int]:
    """Palette ist RGB, OpenCV arbeitet mit BGR."""
    r, g, b = color
    return (int(b), int(g), int(r))


def opacity_for_row(row: float, rows: int = ROWS, group_size: int = GROUP_SIZE) -> float:
    """
    Deckkraft eines Blocks abhängig von seiner Zeile.

    Voll sichtbar bis rows - group_size, danach linearer Fade auf 0
    an der unteren Grid-Kante.
    """
    fade_start = rows - group_size
    if row < fade_start:
        return 1.0
    opacity = 1.0 - (row - fade_start) / group_size
    return max(0.0, min(1.0, opacity))


def draw_rounded_rect(image, top_left, bottom_right, color, radius):
    """Gefülltes Rechteck mit abgerundeten Ecken."""
    x0, y0 = top_left
    x1, y1 = bottom_right
    radius = max(0, min(radius, (x1 - x0) // 2, (y1 - y0) // 2))

    if radius == 0:
        cv2.rectangle(image, (x0, y0), (x1, y1), color, -1)
        return image

    cv2.rectangle(image, (x0 + radius, y0), (x1 - radius, y1), color, -1)
    cv2.rectangle(image, (x0, y0 + radius), (x1, y1 - radius), color, -1)
    for cx, cy in ((x0 + radius, y0 + radius), (x1 - radius, y0 + radius),
                   (x0 + radius, y1 - radius), (x1 - radius, y1 - radius)):
        cv2.circle(image, (cx, cy), radius, color, -1)
    return image


class FrameRenderer:
    """Rendert BlockViews in ein (rows*cell_size, cols*cell_size, 3) uint8 Frame."""

    def __init__(
        self,
        rows: int = ROWS,
        cols: int = COLS,
        cell_size: int = CELL_SIZE,
        group_size: int = GROUP_SIZE,
        fade: bool = True,
        glow: bool = False
    ):
        self.rows = rows
        self.cols = cols
        self.cell_size = cell_size
        self.group_size = group_size
        self.fade = fade
        self.glow = glow

        self.width = cols * cell_size
        self.height = rows * cell_size
        self._background = self._build_background()
        self._block_tiles = {}

        logger.debug(f"FrameRenderer initialisiert: {self.width}x{self.height} ({cols}x{rows} Zellen à {cell_size}px)")

    def _build_background(self) -> np.ndarray:
        """Grid-Hintergrund mit einer leicht eingerückten Zelle pro Grid-Zelle."""
        background = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        background[:, :] = rgb_to_bgr(GRID_BACKGROUND)

        cell_color = rgb_to_bgr(EMPTY_CELL_COLOR)
        size = self.cell_size
        for row in range(self.rows):
            for col in range(self.cols):
                x0, y0 = col * size, row * size
                draw_rounded_rect(background, (x0 + 1, y0 + 1), (x0 + size - 2, y0 + size - 2),
                                  cell_color, CELL_CORNER_RADIUS)
        return background

    def _block_tile(self, color) -> np.ndarray:
        """Block-Kachel (Farbe + schwarzer Rand), gecacht pro Farbe."""
        tile = self._block_tiles.get(color)
        if tile is None:
            tile = np.zeros((self.cell_size, self.cell_size, 3), dtype=np.uint8)
            tile[:, :] = rgb_to_bgr(color)
            cv2.rectangle(tile, (0, 0), (self.cell_size - 1, self.cell_size - 1),
                          rgb_to_bgr(BLOCK_BORDER_COLOR), 1)
            self._block_tiles[color] = tile
        return tile

    def _clip(self, block: BlockView):
        """Sichtbarer Bereich eines Blocks im Frame oder None."""
        x0 = block.column * self.cell_size
        y0 = int(round(block.row * self.cell_size))
        x1 = x0 + self.cell_size
        y1 = y0 + self.cell_size

        ys, ye = max(0, y0), min(self.height, y1)
        xs, xe = max(0, x0), min(self.width, x1)
        if ys >= ye or xs >= xe:
            return None
        return x0, y0, xs, xe, ys, ye

    def _apply_glow(self, frame: np.ndarray, blocks) -> np.ndarray:
        glow_layer = np.zeros_like(frame)
        glow_color = np.array(rgb_to_bgr(BLOCK_GLOW_COLOR), dtype=np.float32) * 0.5

        for block in blocks:
            clipped = self._clip(block)
            if clipped is None:
                continue
            _, _, xs, xe, ys, ye = clipped
            opacity = opacity_for_row(block.row, self.rows, self.group_size) if self.fade else 1.0
            glow_layer[ys:ye, xs:xe] = (glow_color * opacity).astype(np.uint8)

        kernel = self.cell_size // 3 * 2 + 1  # Muss ungerade sein
        glow_layer = cv2.GaussianBlur(glow_layer, (kernel, kernel), 0)
        return cv2.add(frame, glow_layer)

    def render(self, blocks: Iterable[BlockView]) -> np.ndarray:
        """
        Rendert einen Snapshot.

        Args:
            blocks: BlockViews (row in Zeilen, column in Spalten)

        Returns:
            numpy.ndarray: Frame als (height, width, 3) BGR Array
        """
        blocks = list(blocks)
        frame = self._background.copy()

        if self.glow and blocks:
            frame = self._apply_glow(frame, blocks)

        for block in blocks:
            clipped = self._clip(block)
            if clipped is None:
                continue
            x0, y0, xs, xe, ys, ye = clipped

            opacity = opacity_for_row(block.row, self.rows, self.group_size) if self.fade else 1.0
            if opacity <= 0.0:
                continue

            tile = self._block_tile(tuple(block.color))[ys - y0:ye - y0, xs - x0:xe - x0]
            region = frame[ys:ye, xs:xe]
            if opacity >= 1.0:
                frame[ys:ye, xs:xe] = tile
            else:
                frame[ys:ye, xs:xe] = cv2.addWeighted(tile, opacity, region, 1.0 - opacity, 0)

        return frame
