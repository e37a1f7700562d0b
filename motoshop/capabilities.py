"""
Feature switches decided once at startup and stored on the app.
"""
import logging
import os
from dataclasses import dataclass

from flask import current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'motoshop_capabilities'


@dataclass(frozen=True)
class Capabilities:
    upload_enabled: bool

    @classmethod
    def from_config(cls, config):
        upload_enabled = bool(config.get('UPLOADS_ENABLED', False))
        if upload_enabled:
            uploads_dir = os.path.join(config['UPLOADS_DIR'], config.get('SERVICES_UPLOAD_SUBDIR', 'services'))
            try:
                os.makedirs(uploads_dir, exist_ok=True)
            except OSError as e:
                logger.warning(f"Uploads disabled, cannot create {uploads_dir}: {e}")
                upload_enabled = False
        return cls(upload_enabled=upload_enabled)

    def to_dict(self):
        return {'uploadEnabled': self.upload_enabled}


def init_capabilities(app):
    capabilities = Capabilities.from_config(app.config)
    app.extensions[EXTENSION_KEY] = capabilities
    logger.info(f"Capabilities: {capabilities}")
    return capabilities


def get_capabilities(app=None):
    app = app or current_app
    return app.extensions[EXTENSION_KEY]
