import os
import logging
from pathlib import Path
from flask import current_app

logger = logging.getLogger(__name__)


class Logo:
    @staticmethod
    def safe_logo_path(logo_path: str | None = None) -> str | None:
        """Return absolute path to the shop logo, or None if unset or missing.

        Relative paths resolve against SITE_ROOT and may not leave it.
        """
        if logo_path is None:
            logo_path = current_app.config.get('LOGO_PATH')
        if not logo_path:
            return None

        target = Path(logo_path)
        if not target.is_absolute():
            site_root = Path(current_app.config['SITE_ROOT']).resolve()
            target = (site_root / target).resolve()
            # Path traversal protection
            try:
                target.relative_to(site_root)
            except ValueError:
                logger.warning("Attempted path traversal: %s", logo_path)
                return None

        if not target.is_file():
            logger.warning("Logo file not found at %s", target)
            return None

        return os.fspath(target)
