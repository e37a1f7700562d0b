"""
Interface shared by the SQLite and MySQL backends.
"""
from abc import ABC, abstractmethod


class BaseDBManager(ABC):
    """Where the shop data lives and how Flask-SQLAlchemy should connect to it."""

    db_type = None

    @abstractmethod
    def get_sqlalchemy_uri(self) -> str:
        """SQLALCHEMY_DATABASE_URI; may carry credentials."""

    @abstractmethod
    def get_engine_options(self) -> dict:
        """SQLALCHEMY_ENGINE_OPTIONS (pooling, TLS, driver connect args)."""

    def get_log_safe_uri(self) -> str:
        return self.get_sqlalchemy_uri()

    def get_db_type(self) -> str:
        return self.db_type
