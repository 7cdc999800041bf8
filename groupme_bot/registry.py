"""
Ordered storage for registered features.
"""

import logging

from .errors import ConfigurationError
from .models import Feature

logger = logging.getLogger(__name__)


class FeatureRegistry:
    """
    Features in registration order until the one-time sort.

    The sort happens right before the bot starts taking traffic. After that
    the registry is sealed and only read.
    """

    def __init__(self):
        self._features: list[Feature] = []
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def add(self, feature: Feature) -> None:
        """Append a feature. The same feature may be added more than once."""
        if self._sealed:
            raise ConfigurationError(
                "Features cannot be registered after the bot started listening"
            )
        self._features.append(feature)
        logger.debug(f"Registered feature: {feature.description or '<hidden>'}")

    def sort_by_description(self) -> None:
        """Sort features by description once and seal the registry."""
        if self._sealed:
            logger.warning("Feature registry already sorted, ignoring")
            return

        # list.sort is stable, so equal descriptions keep registration order
        self._features.sort(key=lambda feature: feature.description)
        self._sealed = True
        logger.info(f"Feature registry sealed with {len(self._features)} features")

    def all(self) -> tuple[Feature, ...]:
        return tuple(self._features)

    def descriptions(self) -> list[str]:
        """Visible feature descriptions in current order."""
        return [f.description for f in self._features if f.visible]

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self):
        return iter(self.all())
