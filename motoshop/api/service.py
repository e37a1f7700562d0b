from flask import Blueprint, request, jsonify
from motoshop.services.service_record_service import ServiceRecordService
from motoshop.services.upload_service import UploadService
from motoshop.services.errors import ServiceError
from motoshop.schemas.service_record_schema import ServiceRecordSchema
import logging
from motoshop.extensions import db

service_bp = Blueprint('service', __name__)
schema = ServiceRecordSchema(session=db.session)
schema_many = ServiceRecordSchema(many=True, session=db.session)


def _is_multipart():
    return 'multipart/form-data' in (request.content_type or '')


def _request_data():
    """JSON body, or the form fields of a multipart request."""
    if _is_multipart():
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


def _uploaded_image():
    """Stores the optional `image` file; site-relative path or None."""
    if not _is_multipart():
        return None
    UploadService.ensure_enabled()
    file = request.files.get('image')
    if file is None or not file.filename:
        return None
    return UploadService.save_image(file)


@service_bp.route('/services', methods=['GET'])
def list_services():
    try:
        services = ServiceRecordService.get_all(moto_id=request.args.get('moto_id', type=int))
        return jsonify(schema_many.dump(services)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in list_services: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@service_bp.route('/services/<int:service_id>', methods=['GET'])
def get_service(service_id):
    try:
        service = ServiceRecordService.get_by_id(service_id)
        if not service:
            return jsonify({'error': 'Service not found'}), 404
        return jsonify(schema.dump(service)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in get_service: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@service_bp.route('/services', methods=['POST'])
def create_service():
    try:
        data = _request_data()
        errors = schema.validate(data)
        if errors:
            return jsonify(errors), 400
        image = _uploaded_image()
        service = ServiceRecordService.create(data, uploaded_image=image)
        return jsonify(schema.dump(service)), 201
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in create_service: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@service_bp.route('/services/<int:service_id>', methods=['PUT'])
def update_service(service_id):
    try:
        data = _request_data()
        errors = schema.validate(data, partial=True)
        if errors:
            return jsonify(errors), 400
        if not ServiceRecordService.get_by_id(service_id):
            return jsonify({'error': 'Service not found'}), 404
        image = _uploaded_image()
        service = ServiceRecordService.update(service_id, data, uploaded_image=image)
        return jsonify(schema.dump(service)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in update_service: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@service_bp.route('/services/<int:service_id>', methods=['DELETE'])
def delete_service(service_id):
    try:
        success = ServiceRecordService.delete(service_id)
        if not success:
            return jsonify({'error': 'Service not found'}), 404
        return jsonify({'message': 'Service deleted'}), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in delete_service: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500
