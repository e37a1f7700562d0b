"""
Boot-time column check for the ``service`` table.

Databases created by older releases may lack ``completed``/``image_path`` or
still carry ``description`` as a short VARCHAR. Every problem is logged and
skipped; the application starts regardless.
"""
import logging
from typing import List, Optional

from motoshop.database import DataGateway

logger = logging.getLogger(__name__)

SERVICE_TABLE = 'service'

ADD_COLUMN_SQL = {
    'completed': "ALTER TABLE service ADD COLUMN completed BOOLEAN NOT NULL DEFAULT 0",
    'image_path': "ALTER TABLE service ADD COLUMN image_path VARCHAR(2000) NULL",
}

WIDEN_DESCRIPTION_SQL = "ALTER TABLE service MODIFY COLUMN description TEXT NOT NULL"


def _is_text(column_type: str) -> bool:
    return 'TEXT' in (column_type or '').upper()


def ensure_service_columns(gateway: Optional[DataGateway] = None) -> List[str]:
    """Returns the statements that were applied."""
    gateway = gateway or DataGateway()
    applied = []
    try:
        columns = {col['name']: col for col in gateway.show_columns(SERVICE_TABLE)}
    except Exception as e:
        logger.warning(f"Could not inspect {SERVICE_TABLE} columns: {e}")
        return applied

    if not columns:
        logger.warning(f"Table {SERVICE_TABLE} not found; skipping column check")
        return applied

    for name, sql in ADD_COLUMN_SQL.items():
        if name in columns:
            continue
        try:
            gateway.execute(sql)
            applied.append(sql)
            logger.info(f"Added column {SERVICE_TABLE}.{name}")
        except Exception as e:
            logger.warning(f"Could not add column {SERVICE_TABLE}.{name}: {e}")

    description = columns.get('description')
    if description is not None and not _is_text(description['type']):
        dialect = gateway.dialect_name()
        if dialect == 'sqlite':
            logger.warning(
                f"{SERVICE_TABLE}.description is {description['type']}; "
                "SQLite cannot alter column types, leaving it as is")
        else:
            try:
                gateway.execute(WIDEN_DESCRIPTION_SQL)
                applied.append(WIDEN_DESCRIPTION_SQL)
                logger.info(f"Changed {SERVICE_TABLE}.description to TEXT")
            except Exception as e:
                logger.warning(f"Could not change {SERVICE_TABLE}.description to TEXT: {e}")

    return applied
