"""
Blockfall - Fallende Blöcke auf einem festen Grid
"""
from .block import Block, BlockView
from .registry import BlockRegistry
from .scheduler import FrameScheduler, ManualScheduler, ClockScheduler
from .sinks import RenderSink, MemorySink, DisplaySink, VideoRecordingSink, CompositeSink
from .driver import SimulationDriver
from .renderer import FrameRenderer, opacity_for_row
from .config_schema import ConfigValidator, SimulationConfig, validate_config_file

__version__ = "1.0.0"

__all__ = [
    'Block',
    'BlockView',
    'BlockRegistry',
    'FrameScheduler',
    'ManualScheduler',
    'ClockScheduler',
    'RenderSink',
    'MemorySink',
    'DisplaySink',
    'VideoRecordingSink',
    'CompositeSink',
    'SimulationDriver',
    'FrameRenderer',
    'opacity_for_row',
    'ConfigValidator',
    'SimulationConfig',
    'validate_config_file'
]
