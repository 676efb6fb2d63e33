"""
SQLAlchemy handle and schema setup for the Student Records API
"""

import sqlite3
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()

@event.listens_for(Engine, "connect")
def enforce_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def init_db(app):
    """Create missing tables and make sure an admin account exists"""
    with app.app_context():
        import models  # noqa: F401  registers every table on db.metadata

        db.create_all()
        create_default_admin_user(app)
        app.logger.info("Database initialized")

def create_default_admin_user(app):
    """Seed the configured admin account if it is missing"""
    from models.user import User, Role

    email = app.config['DEFAULT_ADMIN_EMAIL']
    if User.query.filter_by(email=email).first() is not None:
        return

    admin = User(name='Administrator', email=email, role=Role.ADMIN)
    admin.set_password(app.config['DEFAULT_ADMIN_PASSWORD'])
    db.session.add(admin)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        app.logger.exception(f"Could not create default admin {email}")
        raise
    app.logger.info(f"Default admin user created: {email}")

def reset_database(app):
    """Drop and recreate every table; all records are lost"""
    with app.app_context():
        db.drop_all()
        db.create_all()
        create_default_admin_user(app)
        app.logger.warning("Database reset completed")
