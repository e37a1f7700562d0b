"""
SQLite backend, used when no MySQL connection is configured.
"""
import logging
import os
from pathlib import Path

from .base import BaseDBManager

logger = logging.getLogger(__name__)

# <repo>/storage/database/motoshop.db
DEFAULT_DB_PATH = Path(__file__).resolve().parents[2] / 'storage' / 'database' / 'motoshop.db'


class SqliteDB(BaseDBManager):
    db_type = 'sqlite'

    def __init__(self, db_path=None):
        db_path = db_path or os.environ.get('DB_PATH')
        if not db_path:
            db_path = DEFAULT_DB_PATH
            logger.warning(f"DB_PATH not set, using {db_path}")
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def get_sqlalchemy_uri(self) -> str:
        return f"sqlite:///{self.db_path}"

    def get_engine_options(self) -> dict:
        # request threads share the file
        return {'connect_args': {'check_same_thread': False, 'timeout': 30.0}}
