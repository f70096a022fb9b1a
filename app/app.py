"""Flask application class carrying the service container."""

from flask import Flask

from app.services.container import ServiceContainer


class App(Flask):
    """Flask subclass exposing the dependency injection container to views and tests."""

    container: ServiceContainer
