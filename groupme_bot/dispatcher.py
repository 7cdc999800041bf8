"""
Central message dispatcher for the GroupMe feature bot.

Handles:
- Ignoring messages from bots (including this one)
- Matching a message against every registered feature
- Isolating failures of individual responders
"""

import logging

from .models import Feature, Message
from .registry import FeatureRegistry

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes each inbound message to every feature that matches it."""

    def __init__(self, registry: FeatureRegistry):
        self.registry = registry

    def dispatch(self, message: Message) -> None:
        """
        Handle one inbound message.

        Args:
            message: Decoded GroupMe message
        """
        if not message.is_from_user:
            logger.debug(f"Ignoring message from sender_type '{message.sender_type}'")
            return

        matched = self.match(message)
        logger.debug(f"{len(matched)} features matched message {message.get('id')}")

        for feature in matched:
            try:
                feature.respond(message)
            except Exception:
                logger.exception(
                    f"Error in feature '{feature.description or '<hidden>'}'"
                )

    def match(self, message: Message) -> list[Feature]:
        """Every feature whose check accepts the message, in registry order."""
        matched = []

        for feature in self.registry.all():
            try:
                if feature.check(message):
                    matched.append(feature)
            except Exception:
                logger.exception(
                    f"Check failed for feature '{feature.description or '<hidden>'}'"
                )

        return matched
