from flask import Blueprint, request, jsonify
from motoshop.services.client_service import ClientService
from motoshop.services.errors import ServiceError
from motoshop.schemas.client_schema import ClientSchema
import logging
from motoshop.extensions import db

client_bp = Blueprint('client', __name__)
schema = ClientSchema(session=db.session)
schema_many = ClientSchema(many=True, session=db.session)

@client_bp.route('/clients', methods=['GET'])
def list_clients():
    try:
        clients = ClientService.get_all()
        return jsonify(schema_many.dump(clients)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in list_clients: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@client_bp.route('/clients/<int:client_id>', methods=['GET'])
def get_client(client_id):
    try:
        client = ClientService.get_by_id(client_id)
        if not client:
            return jsonify({'error': 'Client not found'}), 404
        return jsonify(schema.dump(client)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in get_client: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@client_bp.route('/clients', methods=['POST'])
def create_client():
    try:
        data = request.get_json(silent=True) or {}
        errors = schema.validate(data)
        if errors:
            return jsonify(errors), 400
        client = ClientService.create(data)
        return jsonify(schema.dump(client)), 201
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in create_client: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@client_bp.route('/clients/<int:client_id>', methods=['PUT'])
def update_client(client_id):
    try:
        data = request.get_json(silent=True) or {}
        errors = schema.validate(data, partial=True)
        if errors:
            return jsonify(errors), 400
        client = ClientService.update(client_id, data)
        if not client:
            return jsonify({'error': 'Client not found'}), 404
        return jsonify(schema.dump(client)), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in update_client: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500

@client_bp.route('/clients/<int:client_id>', methods=['DELETE'])
def delete_client(client_id):
    try:
        success = ClientService.delete(client_id)
        if not success:
            return jsonify({'error': 'Client not found'}), 404
        return jsonify({'message': 'Client deleted'}), 200
    except ServiceError as se:
        return jsonify({'error': se.message}), se.status_code
    except Exception as e:
        logging.error(f"Unhandled error in delete_client: {e}", exc_info=True)
        return jsonify({'error': 'An unexpected error occurred. Please try again later.'}), 500
