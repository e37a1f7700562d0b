import logging
from motoshop.extensions import db
from motoshop.models.client import Client
from motoshop.models.moto import Moto
from motoshop.schemas.moto_schema import MotoSchema
from motoshop.services.errors import InvalidRequest, ServiceError


class MotoService:
    @staticmethod
    def get_all(client_id=None):
        try:
            query = Moto.query
            if client_id is not None:
                query = query.filter_by(client_id=client_id)
            return query.order_by(Moto.id.desc()).all()
        except Exception as e:
            logging.error(f"Error fetching motos: {e}", exc_info=True)
            raise ServiceError("Could not fetch motos. Please try again later.", status_code=500)

    @staticmethod
    def get_by_id(moto_id):
        try:
            return db.session.get(Moto, moto_id)
        except Exception as e:
            logging.error(f"Error fetching moto: {e}", exc_info=True)
            raise ServiceError("Could not fetch moto. Please try again later.", status_code=500)

    @staticmethod
    def _check_client(client_id):
        if client_id is not None and db.session.get(Client, int(client_id)) is None:
            raise InvalidRequest(f"Client {client_id} does not exist")

    @staticmethod
    def create(data):
        MotoService._check_client(data.get('client_id'))
        try:
            moto = MotoSchema(session=db.session).load(data)
            db.session.add(moto)
            db.session.commit()
            return moto
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error creating moto: {e}", exc_info=True)
            raise ServiceError("Could not create moto. Please try again later.", status_code=500)

    @staticmethod
    def update(moto_id, data):
        moto = MotoService.get_by_id(moto_id)
        if not moto:
            return None
        if 'client_id' in data:
            MotoService._check_client(data.get('client_id'))
        try:
            MotoSchema(session=db.session).load(data, instance=moto, partial=True)
            db.session.commit()
            return moto
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error updating moto: {e}", exc_info=True)
            raise ServiceError("Could not update moto. Please try again later.", status_code=500)

    @staticmethod
    def delete(moto_id):
        try:
            moto = db.session.get(Moto, moto_id)
            if not moto:
                return False
            db.session.delete(moto)
            db.session.commit()
            return True
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error deleting moto: {e}", exc_info=True)
            raise ServiceError("Could not delete moto. Please try again later.", status_code=500)
