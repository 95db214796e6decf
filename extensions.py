from flask_sqlalchemy import SQLAlchemy


# Shared SQLAlchemy instance. Models import this instead of app.py to avoid circular imports.
db = SQLAlchemy()
