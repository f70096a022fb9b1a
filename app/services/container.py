"""Dependency injection container for services."""

from dependency_injector import containers, providers
from sqlalchemy.orm import sessionmaker

from app.config import Settings
from app.services.conflict_service import ConflictService
from app.services.connection_service import ConnectionService
from app.services.disposal_service import DisposalService
from app.services.identity_resolvers import (
    IdentityResolverChain,
    RigIdentityResolver,
    RigNameResolver,
)
from app.services.lifecycle_service import LifecycleService
from app.services.metrics_service import MetricsService
from app.services.part_service import PartService
from app.services.rig_service import RigService
from app.services.status_service import StatusService
from app.services.timeline_service import TimelineService


class ServiceContainer(containers.DeclarativeContainer):
    """Container for service dependency injection."""

    # Configuration and database session providers
    config = providers.Dependency(instance_of=Settings)
    session_maker = providers.Dependency(instance_of=sessionmaker)
    db_session = providers.ContextLocalSingleton(
        session_maker.provided.call()
    )

    # Metrics service - Singleton so counters are registered once
    metrics_service = providers.Singleton(MetricsService)

    # Derived state - Factory creates new instances for each request
    lifecycle_service = providers.Factory(LifecycleService, db=db_session)
    status_service = providers.Factory(
        StatusService,
        db=db_session,
        lifecycle_service=lifecycle_service
    )

    # Rig identity resolvers, tried in order: start-date keyed names first
    rig_name_resolver = providers.Factory(RigNameResolver, db=db_session)
    rig_identity_resolver = providers.Factory(RigIdentityResolver, db=db_session)
    identity_resolver = providers.Factory(
        IdentityResolverChain,
        resolvers=providers.List(rig_name_resolver, rig_identity_resolver)
    )

    # Commands on the connection log
    conflict_service = providers.Factory(ConflictService, db=db_session)
    connection_service = providers.Factory(
        ConnectionService,
        db=db_session,
        conflict_service=conflict_service,
        metrics_service=metrics_service
    )
    disposal_service = providers.Factory(
        DisposalService,
        db=db_session,
        config=config,
        metrics_service=metrics_service
    )

    part_service = providers.Factory(
        PartService,
        db=db_session,
        status_service=status_service
    )
    rig_service = providers.Factory(
        RigService,
        db=db_session,
        lifecycle_service=lifecycle_service,
        identity_resolver=identity_resolver
    )
    timeline_service = providers.Factory(
        TimelineService,
        db=db_session,
        lifecycle_service=lifecycle_service,
        identity_resolver=identity_resolver,
        connection_service=connection_service,
        disposal_service=disposal_service
    )
