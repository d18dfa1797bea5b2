"""DebtSage: debt payoff planning behind a small Flask app."""

from __future__ import annotations

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestingConfig

_CONFIG_MAP: dict[str, type[BaseConfig]] = {
    "development": DevConfig,
    "testing": TestingConfig,
}


def create_app(config_name: str | None = None) -> Flask:
    """Build the app for ``config_name`` ("development", "testing" or default)."""

    config_cls = _CONFIG_MAP.get((config_name or "").lower(), BaseConfig)
    settings = config_cls()

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(settings)
    app.config["DEBTSAGE_CONFIG"] = settings

    from .blueprints.debts import bp as debts_bp
    from .logging_config import setup_logging
    from .services.jobs import set_async_execution

    setup_logging(settings)
    set_async_execution(settings.ASYNC_JOBS)

    app.register_blueprint(debts_bp)
    _cli.init_app(app)
    return app


__all__ = ["BaseConfig", "DevConfig", "TestingConfig", "create_app"]
