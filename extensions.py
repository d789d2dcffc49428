"""Shared Flask extension instances.

Created here without an application so models and services can import them
before ``create_app`` binds them.
"""
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()
