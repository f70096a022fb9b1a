"""Flask application factory for the Rig History Tracker backend."""

import logging
from typing import TYPE_CHECKING

from flask import Flask
from flask_cors import CORS

if TYPE_CHECKING:
    from app.config import Settings

from app.app import App
from app.config import get_settings
from app.extensions import db
from app.services.container import ServiceContainer


def create_app(settings: "Settings | None" = None) -> App:
    """Create and configure Flask application."""
    app = App(__name__)

    # Load configuration
    if settings is None:
        settings = get_settings()

    app.config.from_object(settings)

    # Initialize extensions
    db.init_app(app)

    # Import models to register them with SQLAlchemy
    from app import models  # noqa: F401

    # Initialize SessionLocal for per-request sessions
    # This needs to be done in app context since db.engine requires it
    with app.app_context():
        from sqlalchemy import event
        from sqlalchemy.orm import Session, sessionmaker

        engine = db.engine

        if settings.is_sqlite:
            # pysqlite opens transactions lazily and breaks SAVEPOINT; let
            # SQLAlchemy emit BEGIN itself and enforce foreign keys.
            @event.listens_for(engine, "connect")
            def _on_connect(dbapi_connection: object, connection_record: object) -> None:
                dbapi_connection.isolation_level = None  # type: ignore[attr-defined]
                cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

            @event.listens_for(engine, "begin")
            def _on_begin(conn) -> None:  # type: ignore[no-untyped-def]
                conn.exec_driver_sql("BEGIN")

        SessionLocal: sessionmaker[Session] = sessionmaker(
            class_=Session,
            bind=engine,
            autoflush=True,
            expire_on_commit=False,
        )

        # Enable SQLAlchemy pool logging via events if configured
        # (echo_pool config option doesn't work reliably in SQLAlchemy 2.x)
        if settings.DB_POOL_ECHO:
            pool_logger = logging.getLogger("sqlalchemy.pool")
            pool_logger.setLevel(logging.DEBUG)
            if not pool_logger.handlers:
                pool_logger.addHandler(logging.StreamHandler())

            @event.listens_for(engine, "checkout")
            def _on_checkout(
                dbapi_conn: object, conn_record: object, conn_proxy: object
            ) -> None:
                pool_logger.debug("CHECKOUT conn=%s %s", id(dbapi_conn), engine.pool.status())

            @event.listens_for(engine, "checkin")
            def _on_checkin(dbapi_conn: object, conn_record: object) -> None:
                pool_logger.debug("CHECKIN conn=%s %s", id(dbapi_conn), engine.pool.status())

    # Initialize SpecTree for OpenAPI docs
    from app.utils.spectree_config import configure_spectree

    configure_spectree(app)

    # Initialize service container after SpecTree
    container = ServiceContainer()
    container.config.override(settings)
    container.session_maker.override(SessionLocal)

    wire_modules = [
        'app.api.parts', 'app.api.connections', 'app.api.disposals',
        'app.api.rigs', 'app.api.timeline', 'app.api.metrics', 'app.api.health',
    ]

    container.wire(modules=wire_modules)

    app.container = container

    # Configure CORS
    CORS(app, origins=settings.CORS_ORIGINS)

    # Initialize Flask-Log-Request-ID for correlation tracking
    from flask_log_request_id import RequestID
    RequestID(app)

    # Register error handlers
    from app.utils.flask_error_handlers import register_error_handlers

    register_error_handlers(app)

    # Register main API blueprint
    from app.api import api_bp

    app.register_blueprint(api_bp)

    @app.teardown_request
    def close_session(exc: Exception | None) -> None:
        """Close the database session after each request."""
        try:
            db_session = container.db_session()
            needs_rollback = db_session.info.get('needs_rollback', False)

            if exc or needs_rollback:
                db_session.rollback()
            else:
                db_session.commit()

            # Clear rollback flag after processing
            db_session.info.pop('needs_rollback', None)
            db_session.close()

        finally:
            # Ensure the scoped session is removed after each request
            container.db_session.reset()

    # Register the Prometheus collectors; status gauges are refreshed per scrape
    metrics_service = container.metrics_service()
    metrics_service.initialize_metrics()

    return app
