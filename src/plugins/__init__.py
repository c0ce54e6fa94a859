"""
Plugin-System für Blockfall
Unterstützt: Generators
"""
from .plugin_base import PluginBase, PluginType, ParameterType

__all__ = ['PluginBase', 'PluginType', 'ParameterType']
