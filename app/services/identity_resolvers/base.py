"""Base class for rig identity resolvers."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.services.lifecycle_service import Lifecycle


class IdentityResolver(ABC):
    """Abstract base class for strategies naming a rig lifecycle."""

    @abstractmethod
    def resolve(self, motherboard_id: int, lifecycle: "Lifecycle") -> str | None:
        """
        Find the name that applies to a lifecycle.

        Args:
            motherboard_id: Motherboard hosting the lifecycle
            lifecycle: Computed lifecycle to name

        Returns:
            The rig name, or None when this store has nothing for the lifecycle
        """
        pass
