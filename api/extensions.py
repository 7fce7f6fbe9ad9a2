"""
Flask extensions shared across blueprints.

The limiter is bound to an application in create_app(); the DBStorage is
built there too and looked up per request through get_storage().
"""
from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from models.db_storage import DBStorage

STORAGE_KEY = "db_storage"

limiter = Limiter(key_func=get_remote_address)


def get_storage() -> DBStorage:
    return current_app.extensions[STORAGE_KEY]


def init_storage(app) -> DBStorage:
    """Build the application's DBStorage from its config and create tables."""
    storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()
    app.extensions[STORAGE_KEY] = storage
    return storage
