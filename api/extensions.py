from flask import current_app

from services.container import ServiceContainer

EXTENSION_KEY = "expense_tracker"


def init_services(app, services: ServiceContainer) -> None:
    app.extensions[EXTENSION_KEY] = services


def get_services() -> ServiceContainer:
    """The ServiceContainer of the app handling the current request."""
    return current_app.extensions[EXTENSION_KEY]
