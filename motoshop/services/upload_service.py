"""
Image uploads stored under UPLOADS_DIR and referenced by site-relative paths
(``/uploads/services/<epoch-ms>_<name>``).
"""
import logging
import os
import time

from flask import current_app
from werkzeug.utils import secure_filename

from motoshop.capabilities import EXTENSION_KEY
from motoshop.services.errors import InvalidRequest, ServiceError

logger = logging.getLogger(__name__)


class UploadService:
    @staticmethod
    def uploads_enabled():
        capabilities = current_app.extensions.get(EXTENSION_KEY)
        if capabilities is not None:
            return capabilities.upload_enabled
        return bool(current_app.config.get('UPLOADS_ENABLED', False))

    @staticmethod
    def ensure_enabled():
        if not UploadService.uploads_enabled():
            raise ServiceError("Server is not accepting file uploads.", status_code=503)

    @staticmethod
    def stored_name(original_name):
        safe = secure_filename(original_name or '') or 'image'
        return f"{int(time.time() * 1000)}_{safe}"

    @staticmethod
    def save_image(file_storage, subdir=None):
        """Validate and store one uploaded image; returns its site-relative path."""
        UploadService.ensure_enabled()
        if file_storage is None or not file_storage.filename:
            raise InvalidRequest("No file uploaded (use field name `image`)")

        allowed = current_app.config['ALLOWED_IMAGE_MIMETYPES']
        if file_storage.mimetype not in allowed:
            raise InvalidRequest("Only image files are allowed")

        content = file_storage.read()
        max_size = current_app.config['MAX_UPLOAD_SIZE']
        if len(content) > max_size:
            raise InvalidRequest(f"File too large (max {max_size // (1024 * 1024)}MB)")
        if not content:
            raise InvalidRequest("Uploaded file is empty")

        subdir = subdir or current_app.config['SERVICES_UPLOAD_SUBDIR']
        target_dir = os.path.join(current_app.config['UPLOADS_DIR'], subdir)
        name = UploadService.stored_name(file_storage.filename)
        try:
            os.makedirs(target_dir, exist_ok=True)
            with open(os.path.join(target_dir, name), 'wb') as fh:
                fh.write(content)
        except OSError as e:
            logging.error(f"Error saving upload {name}: {e}", exc_info=True)
            raise ServiceError("error handling upload", status_code=500)

        local_path = f"/uploads/{subdir}/{name}"
        logger.info(f"Stored upload {local_path} ({len(content)} bytes)")
        return local_path
