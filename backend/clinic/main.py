import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from clinic.core import config
from clinic.core.api_utils import error_response
from clinic.core.exceptions import ClinicError

logger = logging.getLogger(__name__)

# A DATABASE_URL from the environment wins over .env
if not os.getenv("DATABASE_URL"):
    load_dotenv()

WEAK_SECRETS = ("dev-secret-change-me", "secret123")
MIN_SECRET_LENGTH = 32


def _init_sentry(env: str) -> None:
    sentry_dsn = config.get_sentry_dsn()
    if not sentry_dsn:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": env}},
        )
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    release = os.getenv("GIT_SHA", "unknown")
    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=env,
        release=release,
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info(
        "Sentry initialized",
        extra={"context": {"environment": env, "release": release}},
    )


def _init_metrics(app: Flask, env: str) -> None:
    """Expose /metrics. Must run before the limiter so scrapes are not limited."""
    from prometheus_client import CollectorRegistry
    from prometheus_flask_exporter import PrometheusMetrics

    # Tests build many apps in one process; each needs its own registry
    registry = CollectorRegistry(auto_describe=True) if app.config["TESTING"] else None
    metrics = PrometheusMetrics(app, registry=registry)
    try:
        metrics.info(
            "clinic_app_info",
            "Clinic backend build information",
            version=os.getenv("GIT_SHA", "unknown"),
            environment=env,
        )
    except ValueError as e:
        logger.debug(
            "clinic_app_info metric already registered",
            extra={"context": {"error": str(e)}},
        )


def _init_security(app: Flask, is_production: bool) -> None:
    app.config["SECRET_KEY"] = config.get_secret_key()
    if is_production:
        secret_key = app.config["SECRET_KEY"]
        if secret_key in WEAK_SECRETS or len(secret_key) < MIN_SECRET_LENGTH:
            raise ValueError(
                "Production deployment requires strong SECRET_KEY "
                f"(min {MIN_SECRET_LENGTH} chars). Set FLASK_SECRET_KEY."
            )

    from clinic.core.limiter_config import limiter

    app.config["RATELIMIT_STORAGE_URI"] = os.getenv("LIMITER_STORAGE_URI", "memory://")
    limiter.init_app(app)
    if os.getenv("RATE_LIMIT_ENABLED", "1") == "0":
        limiter.enabled = False
        logger.info(
            "Rate limiting disabled", extra={"context": {"testing": config.is_testing()}}
        )

    from clinic.core.csrf_config import csrf

    csrf.init_app(app)
    app.config["WTF_CSRF_TIME_LIMIT"] = None
    app.config["WTF_CSRF_SSL_STRICT"] = is_production

    if is_production:
        from flask_talisman import Talisman

        Talisman(
            app,
            content_security_policy={"default-src": ["'self'"]},
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=63072000,
            frame_options="DENY",
            referrer_policy="no-referrer",
        )


def _register_blueprints(app: Flask) -> None:
    from clinic.controllers import API_BLUEPRINTS, health_bp
    from clinic.core.csrf_config import csrf

    for blueprint in API_BLUEPRINTS:
        csrf.exempt(blueprint)
        app.register_blueprint(blueprint)
    app.register_blueprint(health_bp)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ClinicError)
    def handle_clinic_error(error: ClinicError):
        logger.info(
            "Request rejected",
            extra={
                "context": {
                    "error_type": type(error).__name__,
                    "status_code": error.status_code,
                    "message": error.message,
                }
            },
        )
        return error_response(error.message, error.status_code)

    @app.errorhandler(404)
    def handle_not_found(error):
        return error_response("Resource not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return error_response("Method not allowed", 405)

    @app.errorhandler(429)
    def handle_rate_limited(error):
        return error_response("Too many requests", 429)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error_response(error.description or error.name, error.code or 500)
        logger.error(
            "Unhandled error",
            extra={"context": {"error_type": type(error).__name__, "error": str(error)}},
            exc_info=True,
        )
        return error_response("Internal server error", 500)


def create_app():
    env = config.get_environment()
    is_production = env == "production"

    app = Flask(__name__)
    app.config["TESTING"] = config.is_testing()
    app.config["JSON_SORT_KEYS"] = False

    from clinic.core.logging_config import setup_logging

    setup_logging(
        app=app,
        log_level=logging.INFO if is_production else logging.DEBUG,
        use_json_format=is_production,
    )
    config.log_timezone_config()
    config.log_clinic_config()

    _init_sentry(env)
    _init_metrics(app, env)
    _init_security(app, is_production)
    _register_blueprints(app)
    _register_error_handlers(app)

    from clinic.db.seed import register_cli

    register_cli(app)

    from clinic.db.session import create_tables

    try:
        create_tables()
    except Exception as e:
        logger.error(
            "Error creating tables",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        raise

    @app.route("/")
    def index():
        return jsonify({"service": config.get_clinic_name(), "status": "ok"})

    logger.info(
        "Application created",
        extra={
            "context": {
                "environment": env,
                "blueprints": sorted(app.blueprints.keys()),
            }
        },
    )
    return app
