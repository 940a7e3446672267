"""Application factory and app-wide configuration."""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from backend.app.api.routes import api_bp
from backend.config import Settings
from backend.core.advisor import GeminiRateAdvisor, RateAdvisor

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def create_app(
    settings: Optional[Settings] = None,
    advisor: Optional[RateAdvisor] = None,
) -> Flask:
    """Build the Flask app instance."""
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.config["RATE_ADVISOR"] = advisor or GeminiRateAdvisor(
        api_key=settings.google_api_key,
        model_name=settings.advisor_model,
        timeout=settings.advisor_timeout,
    )

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
