import logging

from flask import Flask, g
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from .extensions import limiter, init_storage, get_storage

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Contact Form API",
        "version": "1.0.0",
        "description": "REST API receiving contact form submissions, with JWT authentication and database seeding.",
    },
    "basePath": "/",  # Blueprints are mounted under /api
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


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    overrides are applied on top of the selected config class (tests use it
    to point DATABASE_URL at a throwaway database).
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    limiter.init_app(app)

    # Storage is built here, once, before any request can reach it
    storage = init_storage(app)

    register_error_handlers(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .forms import bp as forms_bp
    from .seed import bp as seed_bp
    from .cli import register_commands

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/auth")
    app.register_blueprint(forms_bp, url_prefix="/api")
    app.register_blueprint(seed_bp, url_prefix="/api/seed")
    register_commands(app)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    from utils.decorators import jwt_optional

    @app.route("/")
    @jwt_optional()
    def root():
        body = {
            "message": "Contact Form API is up",
            "docs": "/apidocs/",
            "health": "/api/health",
            "endpoints": {
                "register": "POST /api/auth/register",
                "login": "POST /api/auth/login",
                "refresh": "POST /api/auth/refresh",
                "logout": "POST /api/auth/logout",
                "profile": "GET /api/auth/profile",
                "list_forms": "GET /api/forms",
                "submit_form": "POST /api/forms",
                "seed_run": "POST /api/seed/run",
                "seed_clear": "DELETE /api/seed/clear",
                "seed_status": "GET /api/seed/status",
            },
        }
        if g.current_user is not None:
            body["authenticated_as"] = g.current_user.email
        return body, 200

    return app


__all__ = ["create_app", "get_storage"]
