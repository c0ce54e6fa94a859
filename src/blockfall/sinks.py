"""
Render Sinks - Empfänger der Block-Snapshots

Der Simulation Driver kennt nur publish(blocks). Wie gezeichnet, angezeigt
oder aufgenommen wird, entscheidet der Sink.
"""
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Optional, Sequence, Tuple

import cv2

from .block import BlockView
from .constants import DEFAULT_FPS, DEFAULT_HISTORY_LENGTH, DEFAULT_WINDOW_NAME, DEFAULT_VIDEO_CODEC
from .logger import get_logger

logger = get_logger(__name__)


class RenderSink(ABC):
    """Basis-Klasse für alle Sinks."""

    @abstractmethod
    def publish(self, blocks: Sequence[BlockView]):
        """
        Empfängt den Snapshot eines Frames.

        Args:
            blocks: Read-only BlockViews in Einfüge-Reihenfolge
        """
        pass

    def close(self):
        """Gibt Ressourcen frei. Optional überschreibbar."""
        pass


class MemorySink(RenderSink):
    """
    Speichert Snapshots im Speicher, ohne zu zeichnen.
    Nützlich für Tests, Headless-Betrieb und Preview.
    """

    def __init__(self, history_length: int = DEFAULT_HISTORY_LENGTH):
        self.latest: Tuple[BlockView, ...] = ()
        self.history = deque(maxlen=history_length)
        self.frames_published = 0

    def publish(self, blocks):
        self.latest = tuple(blocks)
        self.history.append(self.latest)
        self.frames_published += 1

    def close(self):
        self.history.clear()


class DisplaySink(RenderSink):
    """
    OpenCV-Fenster als Ausgabe.

    ESC oder q schließt das Fenster und ruft on_close auf (Host-Teardown).
    """

    def __init__(self, renderer, window_name: str = DEFAULT_WINDOW_NAME,
                 on_close: Optional[Callable[[], None]] = None):
        self.renderer = renderer
        self.window_name = window_name
        self.on_close = on_close
        self.window_created = False
        self.enabled = True

    def _create_window(self):
        cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(self.window_name, self.renderer.width, self.renderer.height)
        self.window_created = True
        logger.info(f"Fenster erstellt: {self.window_name} ({self.renderer.width}x{self.renderer.height})")

    def publish(self, blocks):
        if not self.enabled:
            return

        try:
            if not self.window_created:
                self._create_window()

            cv2.imshow(self.window_name, self.renderer.render(blocks))

            # Keyboard-Events verarbeiten (1ms wait)
            key = cv2.waitKey(1) & 0xFF
        except cv2.error as e:
            logger.error(f"Display-Fehler: {e}")
            self.enabled = False
            return

        if key in (27, ord('q')):  # ESC / q
            logger.info("Fenster geschlossen (Taste gedrückt)")
            self.close()
            if self.on_close:
                self.on_close()

    def close(self):
        self.enabled = False
        if self.window_created:
            try:
                cv2.destroyWindow(self.window_name)
            except cv2.error as e:
                logger.error(f"Cleanup-Fehler: {e}")
            self.window_created = False


class VideoRecordingSink(RenderSink):
    """Rendert jedes Frame und schreibt es in eine Videodatei."""

    def __init__(self, renderer, path: str, fps: float = DEFAULT_FPS, codec: str = DEFAULT_VIDEO_CODEC):
        self.renderer = renderer
        self.path = path
        self.fps = fps
        self.codec = codec
        self.writer = None
        self.enabled = True
        self.frames_written = 0

    def _open(self) -> bool:
        fourcc = cv2.VideoWriter_fourcc(*self.codec)
        writer = cv2.VideoWriter(self.path, fourcc, self.fps, (self.renderer.width, self.renderer.height))
        if not writer.isOpened():
            logger.error(f"Video-Datei konnte nicht geöffnet werden: {self.path}")
            self.enabled = False
            return False
        self.writer = writer
        logger.info(f"Aufnahme gestartet: {self.path} ({self.fps:.1f} FPS, Codec {self.codec})")
        return True

    def publish(self, blocks):
        if not self.enabled:
            return
        if self.writer is None and not self._open():
            return

        self.writer.write(self.renderer.render(blocks))
        self.frames_written += 1

    def close(self):
        if self.writer is not None:
            self.writer.release()
            self.writer = None
            logger.info(f"✅ Aufnahme gespeichert: {self.path} ({self.frames_written} Frames)")
        self.enabled = False


class CompositeSink(RenderSink):
    """Verteilt jeden Snapshot an mehrere Sinks."""

    def __init__(self, sinks: Sequence[RenderSink]):
        self.sinks = list(sinks)

    def publish(self, blocks):
        blocks = tuple(blocks)
        for sink in self.sinks:
            sink.publish(blocks)

    def close(self):
        for sink in self.sinks:
            sink.close()
