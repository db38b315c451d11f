import atexit
import logging

from flask import Flask, jsonify
from flask_cors import CORS

from config.database import Database
from config.logging_config import setup_logging
from config.settings import settings as default_settings
from routes.admin import admin_bp
from routes.auth import auth_bp
from routes.classes import classes_bp
from services.registry import EXTENSION_KEY, Services, get_services
from utils.errors import register_error_handlers
from utils.serializers import MongoJSONProvider, utcnow

logger = logging.getLogger(__name__)


def create_app(settings=None, database=None):
    """Build the API. The database is created here unless one is injected."""
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    app = Flask(__name__)
    app.json = MongoJSONProvider(app)
    CORS(app, resources={r"/api/*": {"origins": settings.cors_origins}})

    # Configuration
    app.config['SETTINGS'] = settings
    app.config['DEBUG'] = settings.DEBUG

    # Initialize database
    if database is None:
        database = Database(settings)
        atexit.register(database.close)
    database.connect()
    app.extensions[EXTENSION_KEY] = Services(database, settings)

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(classes_bp)
    app.register_blueprint(admin_bp)
    register_error_handlers(app)

    @app.route('/')
    def home():
        return jsonify({"message": "LearnStream API is running!"})

    @app.route('/api/health')
    def health_check():
        connected = get_services().db.ping()
        body = {
            "status": "ok" if connected else "error",
            "database": "connected" if connected else "disconnected",
            "timestamp": utcnow(),
        }
        return jsonify(body), 200 if connected else 503

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=default_settings.DEBUG, port=default_settings.PORT)
