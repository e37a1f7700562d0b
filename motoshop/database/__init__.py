"""
Database selection and raw SQL access.

    from motoshop.database import DBManager, DataGateway

    app.config['SQLALCHEMY_DATABASE_URI'] = DBManager.get_sqlalchemy_uri()
    rows = DataGateway().query("SELECT id, plate FROM moto WHERE client_id = :cid", {'cid': 3})
"""
import os
from threading import Lock

from .gateway import DataGateway, ExecuteResult
from .mysql_db import MySQLDB
from .sqlite_db import SqliteDB

_MYSQL_HINTS = ('MYSQL_URL', 'DB_HOST', 'MYSQLHOST')


class DBManager:
    """
    Process-wide choice of database backend.

    DB_TYPE ('mysql' or 'sqlite') decides. Without it, any MySQL connection
    variable selects MySQL and everything else falls back to SQLite.
    """

    _instance = None
    _lock = Lock()

    def __init__(self):
        db_type = os.environ.get('DB_TYPE', '').lower()
        if not db_type:
            db_type = 'mysql' if any(os.environ.get(k) for k in _MYSQL_HINTS) else 'sqlite'
        self.backend = MySQLDB() if db_type == 'mysql' else SqliteDB()

    @classmethod
    def instance(cls) -> 'DBManager':
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def get_sqlalchemy_uri(cls) -> str:
        return cls.instance().backend.get_sqlalchemy_uri()

    @classmethod
    def get_engine_options(cls) -> dict:
        return cls.instance().backend.get_engine_options()

    @classmethod
    def get_log_safe_uri(cls) -> str:
        return cls.instance().backend.get_log_safe_uri()

    @classmethod
    def get_db_type(cls) -> str:
        return cls.instance().backend.get_db_type()


__all__ = ['DBManager', 'DataGateway', 'ExecuteResult', 'MySQLDB', 'SqliteDB']
