"""
Frame Scheduler - Entkoppelt die Simulation vom Display-Refresh

Ein Scheduler führt pro Frame genau einen Callback aus. Der Callback
fordert das nächste Frame selbst wieder an ("run again before the next
repaint"). cancel() verhindert nur weitere Frames, ein laufender Callback
wird nicht unterbrochen.
"""
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .constants import DEFAULT_FPS, MAX_FRAME_LAG
from .logger import get_logger, log_performance

logger = get_logger(__name__)

FrameCallback = Callable[[], None]


class FrameScheduler(ABC):
    """Basis-Klasse für alle Scheduler."""

    @abstractmethod
    def request_frame(self, callback: FrameCallback):
        """
        Plant callback für das nächste Frame ein.
        Es ist immer höchstens ein Callback ausstehend.
        """
        pass

    @abstractmethod
    def cancel(self):
        """Verwirft den ausstehenden Callback."""
        pass

    @property
    @abstractmethod
    def has_pending(self) -> bool:
        pass


class ManualScheduler(FrameScheduler):
    """
    Scheduler ohne eigene Zeitbasis.

    Frames laufen nur, wenn tick() aufgerufen wird. Für Tests und für Hosts,
    die selbst den Takt vorgeben.
    """

    def __init__(self):
        self._pending: Optional[FrameCallback] = None
        self.frames_run = 0

    def request_frame(self, callback: FrameCallback):
        self._pending = callback

    def cancel(self):
        self._pending = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def tick(self) -> bool:
        """
        Führt den ausstehenden Callback aus.

        Returns:
            True wenn ein Frame ausgeführt wurde
        """
        if self._pending is None:
            return False
        callback = self._pending
        self._pending = None
        callback()
        self.frames_run += 1
        return True

    def run(self, frames: int) -> int:
        """
        Führt bis zu frames Frames aus.

        Returns:
            Anzahl tatsächlich ausgeführter Frames
        """
        executed = 0
        while executed < frames and self.tick():
            executed += 1
        return executed


class ClockScheduler(FrameScheduler):
    """
    Blockierender Frame-Loop im aufrufenden Thread.

    Hält die Ziel-FPS mit Drift-Kompensation ein und synchronisiert neu,
    wenn ein Frame mehr als MAX_FRAME_LAG zu spät ist.
    """

    def __init__(
        self,
        fps: float = DEFAULT_FPS,
        max_frames: Optional[int] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Args:
            fps: Ziel-Framerate
            max_frames: Nach so vielen Frames beenden (None = unbegrenzt)
            clock: Zeitquelle in Sekunden
            sleep: Sleep-Funktion
        """
        self.fps = fps
        self.max_frames = max_frames
        self._clock = clock
        self._sleep = sleep
        self._pending: Optional[FrameCallback] = None
        self.frames_run = 0
        self.late_frames = 0

    def request_frame(self, callback: FrameCallback):
        self._pending = callback

    def cancel(self):
        self._pending = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def frame_time(self) -> float:
        return 1.0 / self.fps

    def run(self) -> int:
        """
        Läuft bis kein Frame mehr angefordert wird oder max_frames erreicht ist.

        Returns:
            Anzahl ausgeführter Frames
        """
        next_frame_time = self._clock()
        logger.info(f"Frame-Loop gestartet ({self.fps:.1f} FPS)")

        while self._pending is not None:
            if self.max_frames is not None and self.frames_run >= self.max_frames:
                logger.info(f"Frame-Limit erreicht: {self.max_frames}")
                self._pending = None
                break

            callback = self._pending
            self._pending = None
            frame_start = self._clock()
            callback()
            self.frames_run += 1
            log_performance(logger, f"Frame {self.frames_run}", (self._clock() - frame_start) * 1000)

            # Präzises Frame-Timing mit Drift-Kompensation
            next_frame_time += self.frame_time
            now = self._clock()
            sleep_time = next_frame_time - now

            if sleep_time > 0:
                self._sleep(sleep_time)
            elif sleep_time < -MAX_FRAME_LAG:  # Zu langsam, Reset
                self.late_frames += 1
                next_frame_time = now + self.frame_time

        logger.info(f"Frame-Loop beendet nach {self.frames_run} Frames")
        return self.frames_run
