"""
Builder API for assembling a GroupMe bot.

Every builder returns the bot itself so calls can be chained:

    bot = (
        Bot()
        .config("abc123")
        .command("ping", lambda message, args: bot.send("pong"))
        .random("flip", ["heads", "tails"], description="Flips a coin.")
        .help()
    )
    bot.listen(port=8080)
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

import uvicorn
from fastapi import FastAPI

from .dispatcher import Dispatcher
from .errors import ConfigurationError, DuplicatePluginError
from .matchers import (
    CommandRespond,
    PatternLike,
    PatternRespond,
    Supply,
    choose,
    command_description,
    derive_command,
    derive_pattern,
)
from .models import Feature, Message, Plugin, SendResult
from .registry import FeatureRegistry
from .sender import GroupMeSender
from .server import create_app

logger = logging.getLogger(__name__)

HELP_DESCRIPTION = "Displays help information about the bot."

# Builder names plugins may not take, besides any other Bot attribute
BUILTIN_NAMES = frozenset({
    "feature",
    "pattern",
    "command",
    "random",
    "help",
    "config",
    "use",
})


class Bot:
    """
    A GroupMe bot: its features, its plugins and its outbound sender.

    Features are registered before the bot starts listening. Once listening,
    the feature set is sorted by description and no longer changes.
    """

    def __init__(self, bot_id: Optional[str] = None, sender: Optional[GroupMeSender] = None):
        self.registry = FeatureRegistry()
        self.dispatcher = Dispatcher(self.registry)
        self.sender = sender if sender is not None else GroupMeSender()
        self._plugins: dict[str, Plugin] = {}

        if bot_id is not None:
            self.config(bot_id)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def config(self, bot_id: str) -> "Bot":
        """Set the GroupMe ID of the bot."""
        self.sender.bot_id = bot_id
        return self

    def feature(
        self,
        check: Callable[[Message], bool],
        respond: Callable[[Message], None],
        description: str = ""
    ) -> "Bot":
        """
        Add a feature to the bot.

        Args:
            check: Decides whether the bot responds to a message
            respond: Called with the message only if check returned True
            description: Shown by /help; empty hides the feature
        """
        self.registry.add(Feature(check=check, respond=respond, description=description))
        return self

    def pattern(
        self,
        pattern: PatternLike,
        respond: PatternRespond,
        description: str = ""
    ) -> "Bot":
        """
        Respond to messages containing a regex or literal string.

        The responder receives the message and every match of the pattern.
        """
        check, handle = derive_pattern(pattern, respond)
        return self.feature(check, handle, description)

    def command(
        self,
        name: str,
        respond: CommandRespond,
        description: Optional[str] = None,
        separator: Optional[PatternLike] = None
    ) -> "Bot":
        """
        Respond to messages of the form `/name [arguments]`.

        Args:
            name: Command name, invoked as /name
            respond: Called with the message and the list of arguments
            description: Human description for /help
            separator: Regex or literal string between arguments,
                whitespace by default
        """
        regex, handle = derive_command(name, respond, separator)
        return self.pattern(regex, handle, command_description(name, description))

    def random(
        self,
        name: str,
        supply: Supply,
        description: Optional[str] = None
    ) -> "Bot":
        """
        Add a command that sends a random pick from a list, or whatever a
        supplier function returns. Great for quotes and other rotating text.
        """
        if isinstance(supply, str):
            raise TypeError(f"Command '/{name}' needs a list of candidates, not a single string")
        if not callable(supply) and not supply:
            raise ValueError(f"Command '/{name}' needs at least one candidate")

        def respond(message: Message, args: list[str]) -> None:
            self.send(choose(supply))

        return self.command(name, respond, description)

    def help(self) -> "Bot":
        """Add a /help command listing every described feature."""

        def respond(message: Message, args: list[str]) -> None:
            self.send("\n".join(self.registry.descriptions()))

        return self.command("help", respond, HELP_DESCRIPTION)

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def use(self, *plugins: Plugin) -> "Bot":
        """
        Install plugins as new builder entry points.

        Raises:
            ConfigurationError: If a name is not a valid identifier
            DuplicatePluginError: If a name is taken by another plugin or by
                a Bot attribute

        Nothing is installed when either is raised.
        """
        taken = set(self._plugins)
        for plugin in plugins:
            if not plugin.name.isidentifier():
                raise ConfigurationError(f"Invalid plugin name '{plugin.name}'")
            if plugin.name in taken or self._is_reserved(plugin.name):
                raise DuplicatePluginError(plugin.name)
            taken.add(plugin.name)

        for plugin in plugins:
            self._plugins[plugin.name] = plugin
            logger.info(f"Installed plugin: {plugin.name}")

        return self

    def _is_reserved(self, name: str) -> bool:
        # Such names would shadow, or be shadowed by, regular attribute lookup
        return (
            name.startswith("_")
            or name in BUILTIN_NAMES
            or hasattr(type(self), name)
            or name in self.__dict__
        )

    @property
    def plugins(self) -> Mapping[str, Plugin]:
        return MappingProxyType(self._plugins)

    def invoke(self, name: str, *args: Any, **kwargs: Any) -> "Bot":
        """Call an installed plugin with this bot as its receiver."""
        plugin = self._plugins.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}'")

        plugin.fn(self, *args, **kwargs)
        return self

    def __getattr__(self, name: str) -> Callable[..., "Bot"]:
        # Only reached for names that are not regular attributes
        if name.startswith("_") or name not in self.__dict__.get("_plugins", {}):
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

        def entry_point(*args: Any, **kwargs: Any) -> "Bot":
            return self.invoke(name, *args, **kwargs)

        return entry_point

    # ------------------------------------------------------------------
    # Runtime
    # ------------------------------------------------------------------

    def send(self, text: str, picture_url: Optional[str] = None) -> SendResult:
        """Send a message as the bot to its group."""
        return self.sender.send(text, picture_url)

    def dispatch(self, message: Message) -> None:
        self.dispatcher.dispatch(message)

    def asgi_app(self) -> FastAPI:
        """Sort the features and build the webhook app."""
        self.registry.sort_by_description()
        return create_app(self.dispatcher)

    def listen(self, host: str = "0.0.0.0", port: int = 8080, **kwargs: Any) -> None:
        """Start serving GroupMe callbacks. Blocks until the server stops."""
        app = self.asgi_app()
        logger.info(f"Listening for GroupMe callbacks on {host}:{port}")
        uvicorn.run(app, host=host, port=port, **kwargs)
