"""
Drop-in plugins from the plugins/ directory.

A plugin folder holds a plugin.py whose get_plugin() returns a Plugin.
Folders that fail to import are skipped; two folders claiming the same
plugin name are a configuration error.
"""

import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Iterator, Mapping, Optional

from .errors import DuplicatePluginError
from .models import Plugin

logger = logging.getLogger(__name__)

PLUGINS_DIR = Path(__file__).parent.parent / "plugins"
PLUGIN_FILE = "plugin.py"
SKIPPED_DIRS = frozenset({"__pycache__", ".git", ".venv", ".tmp"})


class PluginLoader:
    """Loads Plugin descriptors and installs them on a bot."""

    def __init__(self, root_dir: Path | None = None, allowed_plugins: list[str] | None = None):
        self.root_dir = root_dir if root_dir is not None else PLUGINS_DIR
        self.allowed_plugins = allowed_plugins

    def discover_plugins(self) -> list[str]:
        """Folder names holding a plugin.py, alphabetically."""
        return [folder.name for folder in self._plugin_folders()]

    def _plugin_folders(self) -> Iterator[Path]:
        if not self.root_dir.is_dir():
            logger.warning(f"Plugin directory not found: {self.root_dir}")
            return

        for folder in sorted(self.root_dir.iterdir()):
            if not folder.is_dir() or folder.name in SKIPPED_DIRS or folder.name.startswith('.'):
                continue
            if self.allowed_plugins is not None and folder.name not in self.allowed_plugins:
                continue
            if (folder / PLUGIN_FILE).exists():
                yield folder

    def _import(self, folder: Path) -> ModuleType:
        spec = importlib.util.spec_from_file_location(
            f"plugins.{folder.name}",
            folder / PLUGIN_FILE
        )
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def load_plugin(self, name: str) -> Optional[Plugin]:
        """
        Load the plugin in one folder.

        Returns:
            The Plugin, or None if the folder has no usable get_plugin()
        """
        folder = self.root_dir / name
        if not (folder / PLUGIN_FILE).exists():
            logger.error(f"Plugin file not found: {folder / PLUGIN_FILE}")
            return None

        try:
            module = self._import(folder)
        except Exception:
            logger.exception(f"Failed to import plugin folder '{name}'")
            return None

        factory = getattr(module, "get_plugin", None)
        if not callable(factory):
            logger.error(f"No get_plugin() in {name}/{PLUGIN_FILE}")
            return None

        try:
            plugin = factory()
        except Exception:
            logger.exception(f"get_plugin() failed in '{name}'")
            return None

        if not isinstance(plugin, Plugin):
            logger.error(f"get_plugin() in {name} returned {type(plugin).__name__}, not Plugin")
            return None

        if plugin.name != name:
            logger.warning(
                f"Plugin folder '{name}' provides plugin '{plugin.name}'; "
                f"configure it as '{plugin.name}'"
            )
        return plugin

    def load_all_plugins(self) -> dict[str, Plugin]:
        """
        Load every discovered plugin, keyed by plugin name.

        Raises:
            DuplicatePluginError: If two folders provide the same plugin name
        """
        plugins: dict[str, Plugin] = {}
        origins: dict[str, str] = {}

        for folder in self.discover_plugins():
            plugin = self.load_plugin(folder)
            if plugin is None:
                continue

            if plugin.name in plugins:
                logger.error(
                    f"Plugin '{plugin.name}' provided by both "
                    f"'{origins[plugin.name]}' and '{folder}'"
                )
                raise DuplicatePluginError(plugin.name)

            plugins[plugin.name] = plugin
            origins[plugin.name] = folder
            logger.info(f"Loaded plugin: {plugin.name} (from {folder}/)")

        if self.allowed_plugins is not None:
            missing = set(self.allowed_plugins) - set(origins.values())
            for folder in sorted(missing):
                logger.warning(f"Configured plugin '{folder}' was not loaded")

        return plugins

    def install(self, bot, plugin_args: Mapping[str, list[Any]] | None = None) -> dict[str, Plugin]:
        """
        Install every loaded plugin on the bot, then run each one with its
        configured positional arguments.

        Returns:
            The installed plugins, keyed by name
        """
        plugin_args = plugin_args or {}
        plugins = self.load_all_plugins()

        for name in sorted(set(plugin_args) - set(plugins)):
            logger.warning(f"Arguments given for unknown plugin '{name}'")

        bot.use(*plugins.values())
        for name in plugins:
            bot.invoke(name, *plugin_args.get(name, []))

        return plugins
