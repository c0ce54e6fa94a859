"""
Zentrale Konstanten für Blockfall
"""

# Grid Konstanten
ROWS = 15  # Anzahl Zeilen
COLS = 20  # Anzahl Spalten
CELL_SIZE = 30  # Zellgröße in Pixeln

# Simulation Konstanten
GROUP_SIZE = 5  # Blöcke pro fallender Gruppe
FALL_SPEED = 0.05  # Zeilen pro Frame
SPAWN_THRESHOLD = 0.99  # Spawn nur wenn Sample > Threshold (~1 Versuch pro 100 Frames)
SPAWN_OFFSET = 4  # Startzeile des ersten Blocks einer Gruppe
ROW_PRECISION = 9  # Nachkommastellen für Block-Zeilen

# Farbpalette (RGB)
COLORS = [
    (225, 0, 0),
    (0, 225, 0),
    (0, 0, 255),
]

# Render Konstanten (RGB)
GRID_BACKGROUND = (0x22, 0x22, 0x22)
EMPTY_CELL_COLOR = (0x33, 0x33, 0x33)
BLOCK_BORDER_COLOR = (0, 0, 0)
BLOCK_GLOW_COLOR = (220, 20, 60)
CELL_CORNER_RADIUS = 5

# Playback Konstanten
DEFAULT_FPS = 60.0
MAX_FRAME_LAG = 0.1  # Sekunden, danach wird das Frame-Timing neu synchronisiert

# Sink Konstanten
DEFAULT_HISTORY_LENGTH = 300
DEFAULT_WINDOW_NAME = 'blockfall'
DEFAULT_VIDEO_CODEC = 'mp4v'

# Pfad Konstanten
DEFAULT_CONFIG_FILE = 'config.json'
