from flask import Blueprint, request, jsonify
from motoshop.services.moto_service import MotoService
from motoshop.services.errors import ServiceError
from motoshop.schemas.moto_schema import MotoSchema
import logging
from motoshop.extensions import db

moto_bp = Blueprint('moto', __name__)
schema = MotoSchema(session=db.session)
schema_many = MotoSchema(many=True, session=db.session)

@moto_bp.route('/motos', methods=['GET'])
def list_motos():
    try:
        motos = MotoService.get_all(client_id=request.args.get('client_id', type=int))
        return jsonify(schema_many.dump(motos)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in list_motos: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@moto_bp.route('/motos/<int:moto_id>', methods=['GET'])
def get_moto(moto_id):
    try:
        moto = MotoService.get_by_id(moto_id)
        if not moto:
            return jsonify({'error': 'Moto not found'}), 404
        return jsonify(schema.dump(moto)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in get_moto: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@moto_bp.route('/motos', methods=['POST'])
def create_moto():
    try:
        data = request.get_json(silent=True) or {}
        errors = schema.validate(data)
        if errors:
            return jsonify(errors), 400
        moto = MotoService.create(data)
        return jsonify(schema.dump(moto)), 201
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in create_moto: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@moto_bp.route('/motos/<int:moto_id>', methods=['PUT'])
def update_moto(moto_id):
    try:
        data = request.get_json(silent=True) or {}
        errors = schema.validate(data, partial=True)
        if errors:
            return jsonify(errors), 400
        moto = MotoService.update(moto_id, data)
        if not moto:
            return jsonify({'error': 'Moto not found'}), 404
        return jsonify(schema.dump(moto)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in update_moto: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@moto_bp.route('/motos/<int:moto_id>', methods=['DELETE'])
def delete_moto(moto_id):
    try:
        success = MotoService.delete(moto_id)
        if not success:
            return jsonify({'error': 'Moto not found'}), 404
        return jsonify({'message': 'Moto deleted'}), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in delete_moto: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500
