import logging
from typing import Any, Dict

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_sqlalchemy import SQLAlchemy

logger = logging.getLogger(__name__)


class MonitoredSQLAlchemy(SQLAlchemy):
    """SQLAlchemy that can report on its connection pool (see /api/db-check)."""

    def get_pool_stats(self) -> Dict[str, Any]:
        pool = self.engine.pool
        stats: Dict[str, Any] = {'pool_class': type(pool).__name__}
        # StaticPool/NullPool (sqlite) only implement some of these
        for name in ('size', 'checkedout', 'overflow'):
            probe = getattr(pool, name, None)
            if callable(probe):
                try:
                    stats[name] = probe()
                except NotImplementedError:
                    logger.debug(f"{type(pool).__name__} has no {name}()")
        return stats


db = MonitoredSQLAlchemy()
limiter = Limiter(key_func=get_remote_address, default_limits=["1000 per day", "200 per hour"])
