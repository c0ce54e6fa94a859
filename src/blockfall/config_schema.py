"""
Configuration Schema - JSON Schema für config.json Validierung
"""
import copy
import json
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple

import jsonschema

from .constants import (
    ROWS,
    COLS,
    CELL_SIZE,
    GROUP_SIZE,
    FALL_SPEED,
    SPAWN_THRESHOLD,
    SPAWN_OFFSET,
    COLORS,
    DEFAULT_FPS
)
from .logger import get_logger

logger = get_logger(__name__)

RGB_COLOR_SCHEMA = {
    "type": "array",
    "items": {"type": "integer", "minimum": 0, "maximum": 255},
    "minItems": 3,
    "maxItems": 3
}

# JSON Schema für config.json
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "grid": {
            "type": "object",
            "properties": {
                "rows": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 1000,
                    "description": "Anzahl Grid-Zeilen"
                },
                "cols": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 1000,
                    "description": "Anzahl Grid-Spalten"
                },
                "cell_size": {
                    "type": "integer",
                    "minimum": 2,
                    "maximum": 500,
                    "description": "Zellgröße in Pixeln (nur Rendering)"
                }
            }
        },
        "simulation": {
            "type": "object",
            "properties": {
                "group_size": {
                    "type": "integer",
                    "minimum": 1,
                    "description": "Blöcke pro fallender Gruppe"
                },
                "fall_speed": {
                    "type": "number",
                    "exclusiveMinimum": 0,
                    "maximum": 10,
                    "description": "Fallgeschwindigkeit in Zeilen pro Frame"
                },
                "spawn_threshold": {
                    "type": "number",
                    "minimum": 0,
                    "exclusiveMaximum": 1,
                    "description": "Spawn-Versuch nur wenn Zufalls-Sample > Threshold"
                },
                "spawn_offset": {
                    "type": "integer",
                    "description": "Startzeile des ersten Blocks einer Gruppe"
                },
                "block_threshold": {
                    "type": ["number", "null"],
                    "description": "Zeile, unter der eine Spalte als belegt gilt (null = group_size)"
                },
                "seed": {
                    "type": ["integer", "null"],
                    "description": "Seed für die Zufallsquelle (null = zufällig)"
                }
            }
        },
        "palette": {
            "type": "array",
            "items": RGB_COLOR_SCHEMA,
            "minItems": 1,
            "description": "Blockfarben (RGB)"
        },
        "render": {
            "type": "object",
            "properties": {
                "fps": {
                    "type": "number",
                    "minimum": 1,
                    "maximum": 240,
                    "description": "Ziel-Framerate"
                },
                "fade": {
                    "type": "boolean",
                    "description": "Fade-Out am unteren Rand"
                },
                "glow": {
                    "type": "boolean",
                    "description": "Glow-Effekt um Blöcke"
                }
            }
        },
        "app": {
            "type": "object",
            "properties": {
                "console_log_level": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                    "description": "Log-Level für Konsole"
                },
                "log_dir": {
                    "type": ["string", "null"],
                    "description": "Verzeichnis für Log-Dateien (null = nur Konsole)"
                }
            }
        }
    },
    "additionalProperties": True  # Erlaube zusätzliche Properties für Erweiterbarkeit
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merged override rekursiv in eine Kopie von base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigValidator:
    """Validiert Konfigurationsdateien gegen Schema."""

    def __init__(self):
        self.validator = jsonschema.Draft7Validator(CONFIG_SCHEMA)

    def validate(self, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validiert Konfiguration gegen Schema.

        Args:
            config: Configuration Dictionary

        Returns:
            Tuple[bool, List[str]]: (is_valid, error_messages)
        """
        errors = []

        for error in self.validator.iter_errors(config):
            path = ".".join(str(p) for p in error.path) if error.path else "root"
            errors.append(f"{path}: {error.message}")

        # Custom-Validierungen nur auf schema-gültigen Werten
        if not errors:
            errors.extend(self._custom_validations(config))

        is_valid = len(errors) == 0

        if not is_valid:
            logger.error(f"Config-Validierung fehlgeschlagen: {len(errors)} Fehler")
            for error in errors:
                logger.error(f"  - {error}")
        else:
            logger.info("Config-Validierung erfolgreich")

        return is_valid, errors

    def _custom_validations(self, config: Dict[str, Any]) -> List[str]:
        """
        Prüft Kombinationen, die das Schema allein nicht abdeckt.

        Args:
            config: Configuration Dictionary

        Returns:
            List[str]: Liste von Fehlermeldungen
        """
        errors = []
        grid = config.get("grid", {})
        simulation = config.get("simulation", {})

        rows = grid.get("rows", ROWS)
        group_size = simulation.get("group_size", GROUP_SIZE)
        spawn_offset = simulation.get("spawn_offset", SPAWN_OFFSET)
        block_threshold = simulation.get("block_threshold")

        if group_size > rows:
            errors.append(
                f"simulation.group_size: {group_size} ist größer als grid.rows ({rows})"
            )

        if spawn_offset >= rows:
            errors.append(
                f"simulation.spawn_offset: {spawn_offset} muss kleiner als grid.rows ({rows}) sein"
            )

        if block_threshold is not None and block_threshold < 1:
            errors.append(
                f"simulation.block_threshold: {block_threshold} muss mindestens 1 sein"
            )

        return errors

    def get_default_config(self) -> Dict[str, Any]:
        """
        Generiert Standard-Konfiguration.

        Returns:
            Dict[str, Any]: Default Configuration
        """
        return {
            "grid": {
                "rows": ROWS,
                "cols": COLS,
                "cell_size": CELL_SIZE
            },
            "simulation": {
                "group_size": GROUP_SIZE,
                "fall_speed": FALL_SPEED,
                "spawn_threshold": SPAWN_THRESHOLD,
                "spawn_offset": SPAWN_OFFSET,
                "block_threshold": None,
                "seed": None
            },
            "palette": [list(color) for color in COLORS],
            "render": {
                "fps": DEFAULT_FPS,
                "fade": True,
                "glow": False
            },
            "app": {
                "console_log_level": "WARNING",
                "log_dir": None
            }
        }


def validate_config_file(config_path: str) -> Tuple[bool, List[str], Dict[str, Any]]:
    """
    Lädt Config-Datei, merged sie über die Defaults und validiert.

    Args:
        config_path: Pfad zur config.json

    Returns:
        Tuple[bool, List[str], Dict]: (is_valid, errors, config_dict)
    """
    validator = ConfigValidator()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = json.load(f)
    except FileNotFoundError:
        return False, [f"Config-Datei nicht gefunden: {config_path}"], {}
    except json.JSONDecodeError as e:
        return False, [f"JSON-Parsing Fehler: {str(e)}"], {}

    if not isinstance(user_config, dict):
        return False, ["root: Config muss ein JSON-Objekt sein"], {}

    config = _deep_merge(validator.get_default_config(), user_config)
    is_valid, errors = validator.validate(config)
    return is_valid, errors, config


@dataclass
class SimulationConfig:
    """Typisierte Einstellungen für Registry, Driver und Renderer"""
    rows: int = ROWS
    cols: int = COLS
    cell_size: int = CELL_SIZE
    group_size: int = GROUP_SIZE
    fall_speed: float = FALL_SPEED
    spawn_threshold: float = SPAWN_THRESHOLD
    spawn_offset: int = SPAWN_OFFSET
    block_threshold: Optional[float] = None
    seed: Optional[int] = None
    palette: List[Tuple[int, int, int]] = field(default_factory=lambda: list(COLORS))
    fps: float = DEFAULT_FPS
    fade: bool = True
    glow: bool = False

    @staticmethod
    def from_dict(config: Dict[str, Any]) -> 'SimulationConfig':
        """Deserialize from config.json Dictionary (fehlende Werte = Defaults)"""
        grid = config.get('grid', {})
        simulation = config.get('simulation', {})
        render = config.get('render', {})
        palette = config.get('palette') or COLORS

        return SimulationConfig(
            rows=grid.get('rows', ROWS),
            cols=grid.get('cols', COLS),
            cell_size=grid.get('cell_size', CELL_SIZE),
            group_size=simulation.get('group_size', GROUP_SIZE),
            fall_speed=simulation.get('fall_speed', FALL_SPEED),
            spawn_threshold=simulation.get('spawn_threshold', SPAWN_THRESHOLD),
            spawn_offset=simulation.get('spawn_offset', SPAWN_OFFSET),
            block_threshold=simulation.get('block_threshold'),
            seed=simulation.get('seed'),
            palette=[tuple(color) for color in palette],
            fps=render.get('fps', DEFAULT_FPS),
            fade=render.get('fade', True),
            glow=render.get('glow', False)
        )
