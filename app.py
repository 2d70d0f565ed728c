from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge
import logging

from config import Settings, load_settings
from certificate import CertificateStore
from linkedin import LinkedInClient
from routes import main_bp
from linkedin_routes import linkedin_bp
from utils import json_error

MAX_BODY_BYTES = 1024 * 1024


def create_app(settings: Settings = None) -> Flask:
    """Build the Flask app. Raises config.ConfigError when LinkedIn settings are missing."""
    if settings is None:
        settings = load_settings()

    app = Flask(__name__, static_folder=None)
    app.config['SECRET_KEY'] = settings.secret_key
    app.config['MAX_CONTENT_LENGTH'] = MAX_BODY_BYTES
    app.config['PORT'] = settings.port
    app.config['QUIZ_TITLE'] = settings.quiz_title

    CORS(app, origins=list(settings.cors_origins))

    store = CertificateStore(settings.certificates_dir, template_path=settings.certificate_template)
    store.ensure()
    app.extensions['certificate_store'] = store
    app.extensions['linkedin'] = LinkedInClient(
        settings.linkedin_client_id,
        settings.linkedin_client_secret,
        settings.linkedin_redirect_uri,
        timeout=settings.linkedin_timeout,
    )
    logging.info(f"Storing certificates in: {store.directory}")

    @app.errorhandler(RequestEntityTooLarge)
    def _body_too_large(e):
        return json_error('Request body exceeds the 1MB limit.', 413)

    app.register_blueprint(main_bp)
    app.register_blueprint(linkedin_bp)
    return app
