import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError

from models.base_model import Base
from models.contact_form import ContactForm
from models.refresh_token import RefreshToken
from models.user import User

logger = logging.getLogger(__name__)

# Map model names for easy querying
classes = {
    "User": User,
    "RefreshToken": RefreshToken,
    "ContactForm": ContactForm,
}


class DBStorage:
    """Engine plus scoped session shared by every request of one application.

    Constructed explicitly by the application factory and torn down with
    dispose(); there is no module-level instance.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.__engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
        self.__session = None
        # Enable SQLite foreign keys (needed for ON DELETE CASCADE)
        if self.__engine.url.get_backend_name() == "sqlite":
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    def reload(self):
        """Create tables and start session"""
        self.create_tables()
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def create_tables(self):
        """Create any missing table; existing tables are left untouched."""
        Base.metadata.create_all(self.__engine)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def rollback(self):
        self.__session.rollback()

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj:
            self.__session.delete(obj)

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values():
            return self.__session.get(cls, id)
        return None

    def count(self, cls):
        """Count objects"""
        return self.__session.query(cls).count()

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    def dispose(self):
        """Release every pooled connection (process shutdown)."""
        self.close()
        self.__engine.dispose()
        logger.info("Database connections closed")

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
