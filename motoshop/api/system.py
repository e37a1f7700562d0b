from flask import Blueprint, request, jsonify, current_app, send_from_directory
from motoshop.capabilities import get_capabilities
from motoshop.database import DataGateway
from motoshop.extensions import db
from motoshop.services.upload_service import UploadService
from motoshop.services.errors import ServiceError
import logging

system_bp = Blueprint('system', __name__)
uploads_bp = Blueprint('uploads', __name__)


@system_bp.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'}), 200


@system_bp.route('/db-check', methods=['GET'])
def db_check():
    try:
        rows = DataGateway().query("SELECT 1 AS ok")
        return jsonify({'ok': True, 'rows': rows, 'pool': db.get_pool_stats()}), 200
    except Exception as e:
        logging.error(f"DB check failed: {e}", exc_info=True)
        return jsonify({'ok': False, 'error': str(e)}), 500


@system_bp.route('/features', methods=['GET'])
def features():
    return jsonify(get_capabilities().to_dict()), 200


@system_bp.route('/upload', methods=['POST'])
def upload():
    try:
        local_path = UploadService.save_image(request.files.get('image'))
        return jsonify({'ok': True, 'localPath': local_path}), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in upload: {e}", exc_info=True)
        return jsonify({'error': 'error handling upload'}), 500


@uploads_bp.route('/uploads/<path:filename>', methods=['GET'])
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOADS_DIR'], filename)
