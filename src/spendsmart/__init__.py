"""SpendSmart application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable, Union

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .errors import SpendSmartError
from .logging_config import get_logger, setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}

logger = get_logger("app")


def _resolve_config(config: Union[str, BaseConfig, None]) -> BaseConfig:
    """Return a config instance for an environment name or pass one through."""

    if isinstance(config, BaseConfig):
        return config
    if not config:
        return BaseConfig()
    return _CONFIG_MAP.get(config.lower(), BaseConfig)()


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths; each module exposes ``bp``."""

    yield "spendsmart.blueprints.users"
    yield "spendsmart.blueprints.categories"
    yield "spendsmart.blueprints.budgets"
    yield "spendsmart.blueprints.transactions"
    yield "spendsmart.blueprints.savings"
    yield "spendsmart.blueprints.summary"


def create_app(config: Union[str, BaseConfig, None] = None, *, mailer=None) -> Flask:
    """Create and configure the Flask application instance."""

    config_obj = _resolve_config(config)
    setup_logging(config_obj)

    app = Flask(__name__)
    app.config.from_object(config_obj)
    app.config["SPENDSMART_CONFIG"] = config_obj

    # Imported lazily so model metadata is only built when an app is created
    from .context import create_app_context

    app.extensions["spendsmart"] = create_app_context(config_obj, mailer=mailer)

    _register_blueprints(app)
    _register_error_handlers(app)
    _cli.init_app(app)

    logger.info("Application created", extra={"config": type(config_obj).__name__})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(SpendSmartError)
    def _handle_domain_error(error: SpendSmartError):
        if error.status_code >= 500:
            logger.error("Request failed: %s", error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def _handle_http_error(error: HTTPException):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        logger.exception("Unhandled error while processing request")
        return jsonify({"message": "Internal server error"}), 500


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
