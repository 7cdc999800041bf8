"""
Error classes for the GroupMe feature bot.
"""


class ConfigurationError(Exception):
    """Raised when the bot is assembled incorrectly."""
    pass


class DuplicatePluginError(ConfigurationError):
    """Raised when a plugin name is already taken."""

    def __init__(self, plugin_name: str):
        super().__init__(f"Duplicate plugin name '{plugin_name}'!")
        self.plugin_name = plugin_name
