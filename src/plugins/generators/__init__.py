"""
Generator Plugins - Procedural frame generation
"""
from .falling_blocks import FallingBlocksGenerator

__all__ = [
    'FallingBlocksGenerator'
]
