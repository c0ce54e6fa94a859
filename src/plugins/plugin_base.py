"""
Plugin Base Class - Grundlage für Generator-Plugins
Ein Generator erzeugt pro Aufruf ein Frame (Host gibt den Takt vor).
"""
import copy
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Any, Optional

import numpy as np


class PluginType(Enum):
    """Plugin-Typen"""
    GENERATOR = "generator"  # Erzeugt Frames (z.B. FallingBlocksGenerator)


class ParameterType(Enum):
    """Parameter-Typen für UI-Generierung"""
    FLOAT = "float"           # Slider (min, max, step)
    INT = "int"               # Integer Slider (min, max, step)
    BOOL = "bool"             # Checkbox


class PluginBase(ABC):
    """
    Base-Klasse für alle Plugins.

    Jedes Plugin muss METADATA und PARAMETERS definieren sowie die abstrakten
    Methoden implementieren.

    Beispiel-Implementierung:

    ```python
    from plugins import PluginBase, PluginType, ParameterType

    class SolidGenerator(PluginBase):
        METADATA = {
            'id': 'solid',
            'name': 'Solid Color',
            'type': PluginType.GENERATOR
        }

        PARAMETERS = [
            {
                'name': 'brightness',
                'type': ParameterType.INT,
                'default': 255,
                'min': 0,
                'max': 255
            }
        ]

        def initialize(self, config):
            self.brightness = config.get('brightness', 255)

        def generate_frame(self, width, height, frame_number, time, fps):
            return np.full((height, width, 3), self.brightness, dtype=np.uint8)

        def update_parameter(self, name, value):
            if name == 'brightness':
                self.brightness = int(value)
                return True
            return False

        def get_parameters(self):
            return {'brightness': self.brightness}
    ```
    """

    # METADATA - Muss von Subclass definiert werden
    METADATA: Dict[str, Any] = {}

    # PARAMETERS - Muss von Subclass definiert werden
    PARAMETERS: List[Dict[str, Any]] = []

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialisiert Plugin mit Konfiguration.

        Args:
            config: Dictionary mit Parameter-Werten (Key = Parameter Name)
        """
        # Range-Metadaten aus UI-Slidern auf den eigentlichen Wert reduzieren
        if config:
            self.config = {
                key: val['_value'] if isinstance(val, dict) and '_value' in val else val
                for key, val in config.items()
            }
        else:
            self.config = {}

        self._cached_metadata_json = None
        self._cached_parameters_json = None

        self.validate_metadata()
        self.validate_parameters()
        self.initialize(self.config)

    def _get_param_value(self, key: str, default: Any = None) -> Any:
        """
        Holt Parameter-Wert aus der Config, fällt auf den PARAMETERS-Default zurück.

        Args:
            key: Parameter-Name
            default: Wert falls weder Config noch PARAMETERS einen liefern
        """
        if key in self.config:
            return self.config[key]
        for param in self.PARAMETERS:
            if param['name'] == key:
                return param.get('default', default)
        return default

    def validate_metadata(self):
        """Validiert METADATA gegen Schema."""
        required_fields = ['id', 'name', 'type']
        for field in required_fields:
            if field not in self.METADATA:
                raise ValueError(f"Plugin {self.__class__.__name__} fehlt METADATA['{field}']")

        if not isinstance(self.METADATA['type'], PluginType):
            raise ValueError(f"Plugin {self.METADATA['id']}: METADATA['type'] muss PluginType Enum sein")

    def validate_parameters(self):
        """Validiert PARAMETERS Array gegen Schema."""
        for param in self.PARAMETERS:
            if 'name' not in param or 'type' not in param:
                raise ValueError(f"Plugin {self.METADATA['id']}: Parameter fehlt 'name' oder 'type'")

            if not isinstance(param['type'], ParameterType):
                raise ValueError(f"Plugin {self.METADATA['id']}: Parameter '{param['name']}' type muss ParameterType Enum sein")

            if param['type'] in [ParameterType.FLOAT, ParameterType.INT]:
                if 'min' not in param or 'max' not in param:
                    raise ValueError(f"Plugin {self.METADATA['id']}: Parameter '{param['name']}' vom Typ {param['type'].value} benötigt 'min' und 'max'")

    @abstractmethod
    def initialize(self, config: Dict[str, Any]):
        """
        Initialisiert Plugin mit Parametern.
        Wird beim Laden des Plugins aufgerufen.
        """
        pass

    @abstractmethod
    def update_parameter(self, name: str, value: Any) -> bool:
        """
        Aktualisiert einen Parameter zur Laufzeit.

        Returns:
            True wenn Parameter existiert und aktualisiert wurde, False sonst
        """
        pass

    @abstractmethod
    def get_parameters(self) -> Dict[str, Any]:
        """Gibt aktuelle Parameter-Werte zurück."""
        pass

    def cleanup(self):
        """Cleanup-Methode für Plugin-Ressourcen. Optional überschreibbar."""
        pass

    def generate_frame(self, width: int, height: int, frame_number: int, time: float, fps: float) -> np.ndarray:
        """
        Generiert Frame (für GENERATOR Plugins).

        Args:
            width: Frame-Breite
            height: Frame-Höhe
            frame_number: Aktuelle Frame-Nummer
            time: Zeit in Sekunden
            fps: Frames pro Sekunde

        Returns:
            Generiertes Frame (NumPy Array, BGR)
        """
        raise NotImplementedError(f"Plugin {self.METADATA['id']} ist vom Typ {self.METADATA['type'].value} und implementiert keine generate_frame() Methode")

    def get_metadata_json(self) -> Dict[str, Any]:
        """METADATA mit Enum→String Konvertierung (gecacht)."""
        if self._cached_metadata_json is None:
            metadata = self.METADATA.copy()
            if isinstance(metadata.get('type'), PluginType):
                metadata['type'] = metadata['type'].value
            self._cached_metadata_json = metadata

        return self._cached_metadata_json

    def get_parameters_json(self) -> List[Dict[str, Any]]:
        """PARAMETERS mit Enum→String Konvertierung (gecacht)."""
        if self._cached_parameters_json is None:
            # Deep copy, damit die Klassen-Definition unverändert bleibt
            parameters = copy.deepcopy(self.PARAMETERS)
            for param in parameters:
                if isinstance(param.get('type'), ParameterType):
                    param['type'] = param['type'].value
            self._cached_parameters_json = parameters

        return self._cached_parameters_json

    def __repr__(self):
        return f"<{self.__class__.__name__} id={self.METADATA.get('id', 'unknown')} type={self.METADATA.get('type', 'unknown')}>"
