"""Identity resolvers package."""

from .base import IdentityResolver
from .registry import IdentityResolverChain
from .rig_identity_resolver import RigIdentityResolver
from .rig_name_resolver import RigNameResolver

__all__ = [
    'IdentityResolver',
    'IdentityResolverChain',
    'RigIdentityResolver',
    'RigNameResolver',
]
