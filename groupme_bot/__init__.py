"""
GroupMe feature bot.

Register features on a Bot, then let it listen for GroupMe callbacks.
"""

from .models import Feature, Message, Plugin, SendResult, SendStatus
from .errors import ConfigurationError, DuplicatePluginError
from .registry import FeatureRegistry
from .dispatcher import Dispatcher
from .sender import GroupMeSender
from .bot import Bot
from .plugin_loader import PluginLoader

__all__ = [
    'Feature',
    'Message',
    'Plugin',
    'SendResult',
    'SendStatus',
    'ConfigurationError',
    'DuplicatePluginError',
    'FeatureRegistry',
    'Dispatcher',
    'GroupMeSender',
    'Bot',
    'PluginLoader',
]
