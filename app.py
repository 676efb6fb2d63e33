"""
Student Records API
Main Flask application entry point
"""

import logging
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException
from config import get_config
from database import db, init_db
from services.store import Store
from utils.errors import AppError

def setup_logging(app):
    """Console logging, plus a rotating log file outside of tests"""
    formatter = logging.Formatter(
        '%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    level = getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO)

    # Multiple apps share the same logger name, so start clean each time
    for handler in app.logger.handlers[:]:
        app.logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    app.logger.addHandler(console_handler)

    if app.config.get('LOG_FILE') and not app.config.get('TESTING'):
        file_handler = RotatingFileHandler(app.config['LOG_FILE'], maxBytes=1024 * 1024, backupCount=5)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        app.logger.addHandler(file_handler)

    app.logger.setLevel(level)
    app.logger.propagate = False

def register_jwt_handlers(jwt):
    """Token failures answer 401 with a message field"""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'message': "Not authorized, no token"}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        # Expired is treated the same as missing: log in again
        return jsonify({'message': "Not authorized, token expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'message': "Not authorized, token failed"}), 401

def register_error_handlers(app):
    """Render every error as {"message": ...}"""

    @app.errorhandler(AppError)
    def handle_app_error(error):
        if error.status_code >= 500:
            app.logger.error(f"{type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        app.logger.exception(f"Unhandled error: {error}")
        return jsonify({'message': str(error) or "Server error"}), 500

def create_app(config_class=None):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class or get_config())

    setup_logging(app)

    # Initialize extensions with app
    db.init_app(app)
    jwt = JWTManager(app)
    register_jwt_handlers(jwt)
    CORS(app, origins=[app.config['FRONTEND_URL']], supports_credentials=True)

    # Store handle injected into services
    app.extensions['store'] = Store(db.session)

    register_error_handlers(app)

    # Register blueprints
    from routes.auth import auth_bp
    from routes.students import students_bp
    from routes.subjects import subjects_bp
    from routes.marks import marks_bp
    from routes.attendance import attendance_bp
    from routes.dashboard import dashboard_bp

    prefix = app.config['API_PREFIX']
    app.register_blueprint(auth_bp, url_prefix=f'{prefix}/auth')
    app.register_blueprint(students_bp, url_prefix=f'{prefix}/students')
    app.register_blueprint(subjects_bp, url_prefix=f'{prefix}/subjects')
    app.register_blueprint(marks_bp, url_prefix=f'{prefix}/marks')
    app.register_blueprint(attendance_bp, url_prefix=f'{prefix}/attendance')
    app.register_blueprint(dashboard_bp, url_prefix=prefix)

    @app.route('/')
    def index():
        return "student management api is running"

    # Initialize database
    init_db(app)

    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5000, debug=app.config.get('DEBUG', False), use_reloader=False)
