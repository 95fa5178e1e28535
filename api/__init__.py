import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import ProductionConfig, get_config, check_production_config
from .errors import register_error_handlers
from .extensions import init_services
from models.db_storage import DBStorage
from models.seeds import seed_default_categories
from services.container import ServiceContainer

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Expense Tracker API",
        "version": "1.0.0",
        "description": "REST API for tracking personal expenses by category, with JWT sessions.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def create_app(config_name: str | None = None, overrides: dict | None = None,
               storage: DBStorage | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    - config_name selects the config class (dev/test/prod, else APP_ENV)
    - overrides are applied on top of it (tests use this for the database URL)
    - storage may be injected; otherwise one is built from DATABASE_URL
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)
    if config_class is ProductionConfig:
        check_production_config(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    if storage is None:
        storage = DBStorage.from_config(app.config)
    storage.reload()
    if app.config.get("SEED_DEFAULT_CATEGORIES", True):
        seed_default_categories(storage)
        storage.close()

    init_services(app, ServiceContainer.build(storage, app.config))

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .categories import bp as categories_bp
    from .expenses import bp as expenses_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(users_bp, url_prefix="/api/v1")
    app.register_blueprint(categories_bp, url_prefix="/api/v1")
    app.register_blueprint(expenses_bp, url_prefix="/api/v1")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Expense Tracker API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    logging.getLogger(__name__).info("Expense Tracker API created (env=%s)", app.config.get("APP_ENV"))
    return app
