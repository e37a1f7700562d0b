import logging
import os
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_limiter.errors import RateLimitExceeded
from werkzeug.exceptions import HTTPException

from motoshop.config import get_config
from motoshop.database import DBManager
from motoshop.extensions import db, limiter
from motoshop.capabilities import init_capabilities
from motoshop.utils.request_logger import RequestLogger

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


def configure_logging(app):
    handlers = [logging.StreamHandler()]
    if app.config.get('LOG_TO_FILE', True):
        logs_dir = os.path.join(app.config['SITE_ROOT'], 'logs')
        os.makedirs(logs_dir, exist_ok=True)
        handlers.insert(0, logging.FileHandler(os.path.join(logs_dir, 'app.log')))
    logging.basicConfig(
        level=logging.DEBUG if app.config.get('DEBUG') else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        handlers=handlers,
    )


def register_models():
    # models register themselves on db.metadata at import time
    import motoshop.models.client  # noqa: F401
    import motoshop.models.moto  # noqa: F401
    import motoshop.models.service_record  # noqa: F401
    import motoshop.models.invoice_line  # noqa: F401


def register_blueprints(app):
    from motoshop.api.client import client_bp
    from motoshop.api.moto import moto_bp
    from motoshop.api.service import service_bp
    from motoshop.api.invoice import invoice_bp
    from motoshop.api.system import system_bp, uploads_bp

    for blueprint in (client_bp, moto_bp, service_bp, invoice_bp, system_bp):
        app.register_blueprint(blueprint, url_prefix='/api')
    app.register_blueprint(uploads_bp)


def register_error_handlers(app):
    @app.errorhandler(400)
    def bad_request(error):
        logger.error(f"400 Bad Request for {request.method} {request.url}: {error}")
        return jsonify({'error': 'Bad Request', 'message': str(error), 'path': request.path}), 400

    @app.errorhandler(404)
    def not_found(error):
        logger.error(f"404 error for path: {request.path}")
        if request.path.startswith('/api/'):
            return jsonify({'error': 'API endpoint not found', 'path': request.path}), 404
        return jsonify({'error': 'Page not found', 'path': request.path}), 404

    @app.errorhandler(413)
    def too_large(error):
        max_mb = app.config['MAX_UPLOAD_SIZE'] // (1024 * 1024)
        logger.warning(f"413 Payload too large for {request.method} {request.url}")
        return jsonify({'error': f'File too large (max {max_mb}MB)'}), 413

    @app.errorhandler(RateLimitExceeded)
    def ratelimit_handler(e):
        logger.warning(f"Rate limit exceeded for {request.method} {request.url}")
        return jsonify({'error': 'Rate limit exceeded. Please try again later.'}), 429

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({'error': e.name, 'message': e.description}), e.code
        logger.error(f"Unhandled exception for {request.method} {request.url}: {e}", exc_info=True)
        return jsonify({'error': 'Internal server error', 'detail': str(e)}), 500


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or get_config())

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        app.config['SQLALCHEMY_DATABASE_URI'] = DBManager.get_sqlalchemy_uri()
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = DBManager.get_engine_options()
        database_label = DBManager.get_log_safe_uri()
    else:
        database_label = "configured URI"

    configure_logging(app)
    logger.info(f"App working directory: {os.getcwd()}")
    logger.info(f"Database: {database_label}")

    CORS(app, resources={r"/api/*": {"origins": os.environ.get('CORS_ORIGINS', '*').split(',')}})

    db.init_app(app)
    limiter.init_app(app)
    init_capabilities(app)
    RequestLogger.init_app(app)

    os.makedirs(app.config['INVOICES_DIR'], exist_ok=True)

    register_models()
    register_blueprints(app)
    register_error_handlers(app)

    with app.app_context():
        from motoshop.services.schema_migration import ensure_service_columns
        db.create_all()
        ensure_service_columns()

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(
        host=app.config.get('FLASK_HOST', '0.0.0.0'),
        port=app.config.get('FLASK_PORT', 3000),
        debug=app.config.get('DEBUG', False),
    )
