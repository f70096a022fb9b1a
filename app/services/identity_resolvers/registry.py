"""Chain of identity resolvers tried in priority order."""

import logging
from typing import TYPE_CHECKING

from .base import IdentityResolver

if TYPE_CHECKING:
    from app.services.lifecycle_service import Lifecycle

logger = logging.getLogger(__name__)


class IdentityResolverChain(IdentityResolver):
    """Registry that asks each resolver in turn until one names the lifecycle."""

    def __init__(self, resolvers: list[IdentityResolver] | None = None):
        self._resolvers: list[IdentityResolver] = []
        for resolver in resolvers or []:
            self.register(resolver)

    def register(self, resolver: IdentityResolver) -> None:
        """
        Register a resolver after the ones already present.

        Args:
            resolver: Resolver instance to register
        """
        self._resolvers.append(resolver)
        logger.debug(f"Registered identity resolver: {resolver.__class__.__name__}")

    @property
    def resolvers(self) -> list[IdentityResolver]:
        return list(self._resolvers)

    def resolve(self, motherboard_id: int, lifecycle: "Lifecycle") -> str | None:
        for resolver in self._resolvers:
            name = resolver.resolve(motherboard_id, lifecycle)
            if name:
                return name
        return None
