"""Application factory wiring Flask extensions, services and blueprints."""

from __future__ import annotations

from flask import Flask

from auth_api.core.config import BaseConfig, ensure_secrets, get_config
from auth_api.core.logger import configure_logging
from auth_api.core.logger import init_app as init_logging


def create_app(config: str | type[BaseConfig] | object | None = None) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class, import string or object; defaults to the
        class selected by ``APP_ENV``.
    :raises RuntimeError: When signing secrets are unsafe outside debug/testing.
    """

    app = Flask(__name__)
    app.config.from_object(get_config() if config is None else config)
    ensure_secrets(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from auth_api.core import middleware

    middleware.init_app(app)

    from auth_api.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from auth_api.core import metrics

    metrics.init_app(app)

    from auth_api import services

    services.init_app(app)

    from auth_api.api import init_app as init_api

    init_api(app)

    from auth_api.core import errors

    errors.init_app(app)

    return app
