"""
Simulation Driver - Treibt die Zeit voran und entscheidet über neue Gruppen

Pro Frame:
1. Registry.advance(fall_speed)
2. Registry.cull()
3. Zufalls-Sample > spawn_threshold → Spawn-Versuch in zufälliger Spalte
4. Spalte belegt → Spawn für dieses Frame verwerfen (kein Retry, keine Queue)
5. Snapshot an den Render-Sink publizieren
"""
import random
from typing import Optional, Sequence, Tuple

from .block import BlockView, Color
from .constants import COLS, COLORS, FALL_SPEED, SPAWN_THRESHOLD
from .logger import get_logger
from .registry import BlockRegistry
from .scheduler import FrameScheduler, ManualScheduler
from .sinks import MemorySink, RenderSink

logger = get_logger(__name__)


class SimulationDriver:
    """Einziger Zustand: läuft oder läuft nicht. Kein Pause-Zustand."""

    def __init__(
        self,
        registry: BlockRegistry,
        sink: Optional[RenderSink] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[FrameScheduler] = None,
        cols: int = COLS,
        palette: Sequence[Color] = COLORS,
        fall_speed: float = FALL_SPEED,
        spawn_threshold: float = SPAWN_THRESHOLD
    ):
        """
        Initialisiert den Driver.

        Args:
            registry: Block Registry (wird exklusiv von diesem Driver verändert)
            sink: Empfänger der Snapshots (None = MemorySink)
            rng: Zufallsquelle (None = ungeseedetes random.Random)
            scheduler: Frame Scheduler (None = ManualScheduler)
            cols: Anzahl Grid-Spalten
            palette: Farbpalette
            fall_speed: Zeilen pro Frame
            spawn_threshold: Spawn-Versuch nur wenn Sample > Threshold
        """
        self.registry = registry
        self.sink = sink if sink is not None else MemorySink()
        self.rng = rng if rng is not None else random.Random()
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.cols = cols
        self.palette = list(palette)
        self.fall_speed = fall_speed
        self.spawn_threshold = spawn_threshold

        self.is_running = False
        self.frame_number = 0
        self.groups_spawned = 0
        self.spawns_rejected = 0

    @classmethod
    def from_config(cls, config, sink=None, rng=None, scheduler=None):
        """
        Baut Registry und Driver aus einer SimulationConfig.

        Args:
            config: SimulationConfig
            sink: Optionaler Render-Sink
            rng: Optionale Zufallsquelle (None = aus config.seed)
            scheduler: Optionaler Scheduler
        """
        registry = BlockRegistry(
            rows=config.rows,
            group_size=config.group_size,
            spawn_offset=config.spawn_offset,
            block_threshold=config.block_threshold
        )
        if rng is None:
            rng = random.Random(config.seed)
        return cls(
            registry,
            sink=sink,
            rng=rng,
            scheduler=scheduler,
            cols=config.cols,
            palette=config.palette,
            fall_speed=config.fall_speed,
            spawn_threshold=config.spawn_threshold
        )

    def step(self) -> Tuple[BlockView, ...]:
        """
        Führt genau ein Frame aus.

        Returns:
            Der publizierte Snapshot
        """
        self.registry.advance(self.fall_speed)
        self.registry.cull()

        if self.rng.random() > self.spawn_threshold:
            column = self.rng.randrange(self.cols)
            # Farbe wird nur gezogen, wenn die Spalte frei ist
            if self.registry.try_spawn(column, lambda: self.rng.choice(self.palette)):
                self.groups_spawned += 1
            else:
                self.spawns_rejected += 1
                logger.debug(f"Frame {self.frame_number}: Spalte {column} belegt, Spawn übersprungen")

        blocks = self.registry.snapshot()
        self.frame_number += 1
        self.sink.publish(blocks)
        return blocks

    def _on_frame(self):
        """Scheduler-Callback: Schritt ausführen und nächstes Frame anfordern."""
        self.step()
        # Sink oder Host kann während step() gestoppt haben
        if self.is_running:
            self.scheduler.request_frame(self._on_frame)

    def start(self):
        """Startet die Simulation (plant das erste Frame ein)."""
        if self.is_running:
            logger.debug("Simulation läuft bereits!")
            return
        self.is_running = True
        self.scheduler.request_frame(self._on_frame)
        logger.info(f"Simulation gestartet ({self.cols} Spalten, {self.registry.rows} Zeilen)")

    def stop(self):
        """Beendet die Simulation. Ein laufender Schritt wird noch abgeschlossen."""
        if not self.is_running:
            logger.debug("Simulation läuft nicht!")
            return
        self.is_running = False
        self.scheduler.cancel()
        logger.info(f"Simulation gestoppt nach {self.frame_number} Frames")

    def reset(self):
        """Leert die Registry und setzt alle Zähler zurück."""
        self.registry.clear()
        self.frame_number = 0
        self.groups_spawned = 0
        self.spawns_rejected = 0

    def stats(self) -> dict:
        return {
            'frames': self.frame_number,
            'groups_spawned': self.groups_spawned,
            'spawns_rejected': self.spawns_rejected,
            'live_blocks': len(self.registry),
            'is_running': self.is_running
        }
