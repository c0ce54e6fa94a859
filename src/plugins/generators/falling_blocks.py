"""
Falling Blocks Generator Plugin - Farbige Blockgruppen fallen durch ein Grid
"""
import cv2
import numpy as np

from blockfall.config_schema import SimulationConfig
from blockfall.driver import SimulationDriver
from blockfall.renderer import FrameRenderer
from blockfall.sinks import MemorySink
from plugins import PluginBase, PluginType, ParameterType


class FallingBlocksGenerator(PluginBase):
    """
    Falling Blocks Generator.

    Jeder generate_frame() Aufruf ist genau ein Simulations-Schritt, der Host
    gibt also den Takt vor. Frame 0 oder ein Sprung zurück startet die
    Simulation neu.
    """

    METADATA = {
        'id': 'falling_blocks',
        'name': 'Falling Blocks',
        'description': 'Farbige Blockgruppen fallen durch ein Grid und blenden unten aus',
        'author': 'Blockfall Team',
        'version': '1.0.0',
        'type': PluginType.GENERATOR,
        'category': 'Procedural'
    }

    PARAMETERS = [
        {
            'name': 'rows',
            'label': 'Rows',
            'type': ParameterType.INT,
            'default': 15,
            'min': 5,
            'max': 100,
            'step': 1,
            'description': 'Grid rows'
        },
        {
            'name': 'cols',
            'label': 'Columns',
            'type': ParameterType.INT,
            'default': 20,
            'min': 1,
            'max': 100,
            'step': 1,
            'description': 'Grid columns'
        },
        {
            'name': 'cell_size',
            'label': 'Cell Size',
            'type': ParameterType.INT,
            'default': 30,
            'min': 4,
            'max': 100,
            'step': 1,
            'description': 'Cell size in pixels before scaling to the output'
        },
        {
            'name': 'group_size',
            'label': 'Group Size',
            'type': ParameterType.INT,
            'default': 5,
            'min': 1,
            'max': 10,
            'step': 1,
            'description': 'Blocks per falling group'
        },
        {
            'name': 'fall_speed',
            'label': 'Fall Speed',
            'type': ParameterType.FLOAT,
            'default': 0.05,
            'min': 0.01,
            'max': 1.0,
            'step': 0.01,
            'description': 'Rows per frame'
        },
        {
            'name': 'spawn_threshold',
            'label': 'Spawn Threshold',
            'type': ParameterType.FLOAT,
            'default': 0.99,
            'min': 0.0,
            'max': 0.999,
            'step': 0.001,
            'description': 'Spawn attempt only when a random sample exceeds this value'
        },
        {
            'name': 'seed',
            'label': 'Seed',
            'type': ParameterType.INT,
            'default': -1,
            'min': -1,
            'max': 2**31 - 1,
            'step': 1,
            'description': 'Random seed (-1 = random)'
        },
        {
            'name': 'fade',
            'label': 'Fade Out',
            'type': ParameterType.BOOL,
            'default': True,
            'description': 'Fade blocks out near the bottom'
        },
        {
            'name': 'glow',
            'label': 'Glow',
            'type': ParameterType.BOOL,
            'default': False,
            'description': 'Glow around falling blocks'
        }
    ]

    def initialize(self, config):
        """Initialisiert Generator mit Parametern."""
        self.rows = int(self._get_param_value('rows'))
        self.cols = int(self._get_param_value('cols'))
        self.cell_size = int(self._get_param_value('cell_size'))
        self.group_size = int(self._get_param_value('group_size'))
        self.fall_speed = float(self._get_param_value('fall_speed'))
        self.spawn_threshold = float(self._get_param_value('spawn_threshold'))
        self.seed = int(self._get_param_value('seed'))
        self.fade = bool(self._get_param_value('fade'))
        self.glow = bool(self._get_param_value('glow'))
        self._build()

    def _build(self):
        """Baut Simulation und Renderer mit den aktuellen Parametern neu auf."""
        settings = SimulationConfig(
            rows=self.rows,
            cols=self.cols,
            cell_size=self.cell_size,
            group_size=self.group_size,
            fall_speed=self.fall_speed,
            spawn_threshold=self.spawn_threshold,
            seed=None if self.seed < 0 else self.seed,
            fade=self.fade,
            glow=self.glow
        )
        self.sink = MemorySink(history_length=1)
        self.driver = SimulationDriver.from_config(settings, sink=self.sink)
        self.renderer = FrameRenderer(
            rows=self.rows,
            cols=self.cols,
            cell_size=self.cell_size,
            group_size=self.group_size,
            fade=self.fade,
            glow=self.glow
        )
        self.last_frame = -1

    def generate_frame(self, width, height, frame_number, time, fps):
        """
        Generiert Falling Blocks Frame.

        Args:
            width: Frame-Breite
            height: Frame-Höhe
            frame_number: Aktuelle Frame-Nummer
            time: Unused (Geschwindigkeit ist pro Frame, nicht pro Sekunde)
            fps: Unused

        Returns:
            numpy.ndarray: Frame als (height, width, 3) BGR Array
        """
        # Reset wenn neuer Durchlauf (zurück zu Frame 0 oder Zeit-Sprung)
        if frame_number == 0 or frame_number < self.last_frame:
            self._build()
        self.last_frame = frame_number

        blocks = self.driver.step()
        frame = self.renderer.render(blocks)

        if frame.shape[1] != width or frame.shape[0] != height:
            frame = cv2.resize(frame, (width, height), interpolation=cv2.INTER_NEAREST)

        return np.ascontiguousarray(frame)

    def update_parameter(self, name, value):
        """Update parameter zur Laufzeit."""
        if isinstance(value, dict) and '_value' in value:
            value = value['_value']

        if name == 'fall_speed':
            self.fall_speed = float(value)
            self.driver.fall_speed = self.fall_speed
            return True
        elif name == 'spawn_threshold':
            self.spawn_threshold = float(value)
            self.driver.spawn_threshold = self.spawn_threshold
            return True
        elif name == 'group_size':
            if int(value) > self.rows:
                return False  # Gruppe passt nicht ins Grid
            self.group_size = int(value)
            # Neue Gruppen nutzen die neue Größe, laufende Blöcke bleiben
            self.driver.registry.group_size = self.group_size
            self.driver.registry.block_threshold = self.group_size
            self.renderer.group_size = self.group_size
            return True
        elif name == 'seed':
            self.seed = int(value)
            self.driver.rng.seed(None if self.seed < 0 else self.seed)
            return True
        elif name == 'fade':
            self.fade = bool(value)
            self.renderer.fade = self.fade
            return True
        elif name == 'glow':
            self.glow = bool(value)
            self.renderer.glow = self.glow
            return True
        elif name == 'rows' and int(value) < self.group_size:
            return False
        elif name in ('rows', 'cols', 'cell_size'):
            setattr(self, name, int(value))
            self._build()  # Grid-Änderung → Neustart
            return True
        return False

    def get_parameters(self):
        """Gibt aktuelle Parameter zurück."""
        return {
            'rows': self.rows,
            'cols': self.cols,
            'cell_size': self.cell_size,
            'group_size': self.group_size,
            'fall_speed': self.fall_speed,
            'spawn_threshold': self.spawn_threshold,
            'seed': self.seed,
            'fade': self.fade,
            'glow': self.glow
        }

    def cleanup(self):
        """Cleanup beim Beenden."""
        self.driver.reset()
        self.sink.close()
