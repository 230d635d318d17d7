from flask import Flask
from flasgger import Swagger
from prometheus_flask_exporter import PrometheusMetrics
from flask_cors import CORS
import os

from .logging_setup import setup_logging
from .routes import deploy_routes, health
from .config import DevelopmentConfig, ProductionConfig, TestingConfig


def create_app(config_name: str = "development"):
    app = Flask(__name__)

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }
    app.config.from_object(config_map.get(config_name.lower(), DevelopmentConfig))

    setup_logging(app)

    # CORS_ORIGINS unset or '*' -> any origin; otherwise a comma-separated allow list
    cors_origin = os.getenv("CORS_ORIGINS", "*").strip()
    cors_common_kwargs = dict(
        supports_credentials=False,
        methods=["GET", "POST", "DELETE", "OPTIONS", "HEAD"],
        allow_headers=[
            "Content-Type",
            "Authorization",
            "X-Requested-With",
            "X-Request-ID",
            "Accept",
            "Origin",
        ],
    )
    if cors_origin == "*" or cors_origin == "":
        CORS(app, resources={r"/*": {"origins": "*"}}, **cors_common_kwargs)
    else:
        origins_list = [o.strip() for o in cors_origin.split(",") if o.strip()]
        CORS(app, resources={r"/*": {"origins": origins_list}}, **cors_common_kwargs)

    from .models import init_app as init_models
    init_models(app)

    # Swagger
    swagger_template = {
        "swagger": "2.0",
        "info": {
            "title": "deployhub API",
            "description": "Imports hardhat deployment artifacts into the platform record store.",
            "version": "1.0.0",
        },
        "basePath": "/",
        "schemes": ["https"],
    }
    swagger_config = {
        "headers": [],
        "specs": [
            {
                "endpoint": "apispec_1",
                "route": "/apispec_1.json",
                "rule_filter": lambda rule: True,
                "model_filter": lambda tag: True,
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/apidocs/",
    }
    Swagger(app, template=swagger_template, config=swagger_config)

    # Blueprints
    app.register_blueprint(health.bp)
    app.register_blueprint(deploy_routes.bp, url_prefix="/api/deploy")

    # CLI
    from .cli import deploy_cli
    app.cli.add_command(deploy_cli)

    # Metrics (the exporter registers process-wide collectors, keep one per process)
    if not app.testing:
        metrics = PrometheusMetrics(app, path="/metrics")
        metrics.info("app_info", "deployhub artifact import service", version="1.0.0")

    return app
