import logging
from motoshop.extensions import db
from motoshop.models.client import Client
from motoshop.schemas.client_schema import ClientSchema
from motoshop.services.errors import ServiceError


class ClientService:
    @staticmethod
    def get_all():
        try:
            return Client.query.order_by(Client.name).all()
        except Exception as e:
            logging.error(f"Error fetching clients: {e}", exc_info=True)
            raise ServiceError("Could not fetch clients. Please try again later.", status_code=500)

    @staticmethod
    def get_by_id(client_id):
        try:
            return db.session.get(Client, client_id)
        except Exception as e:
            logging.error(f"Error fetching client: {e}", exc_info=True)
            raise ServiceError("Could not fetch client. Please try again later.", status_code=500)

    @staticmethod
    def create(data):
        try:
            client = ClientSchema(session=db.session).load(data)
            db.session.add(client)
            db.session.commit()
            return client
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error creating client: {e}", exc_info=True)
            raise ServiceError("Could not create client. Please try again later.", status_code=500)

    @staticmethod
    def update(client_id, data):
        try:
            client = db.session.get(Client, client_id)
            if not client:
                return None
            ClientSchema(session=db.session).load(data, instance=client, partial=True)
            db.session.commit()
            return client
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error updating client: {e}", exc_info=True)
            raise ServiceError("Could not update client. Please try again later.", status_code=500)

    @staticmethod
    def delete(client_id):
        try:
            client = db.session.get(Client, client_id)
            if not client:
                return False
            db.session.delete(client)
            db.session.commit()
            return True
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error deleting client: {e}", exc_info=True)
            raise ServiceError("Could not delete client. Please try again later.", status_code=500)
