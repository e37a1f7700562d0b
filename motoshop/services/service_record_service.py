import logging
from motoshop.extensions import db
from motoshop.models.moto import Moto
from motoshop.models.service_record import ServiceRecord
from motoshop.schemas.service_record_schema import ServiceRecordSchema
from motoshop.services.errors import InvalidRequest, ServiceError


def merge_image_path(existing, explicit=None, explicit_given=False, uploaded=None):
    """
    New value for the comma-separated image list on update.

    An explicit value replaces the stored list ('' or None clears it) and an
    uploaded image is appended to it. Without an explicit value an upload is
    appended to what is stored. Returns ``existing`` when nothing changes.
    """
    base = existing
    if explicit_given:
        base = (explicit or '').strip() or None
    if uploaded:
        base = f"{base},{uploaded}" if base else uploaded
    return base


class ServiceRecordService:
    @staticmethod
    def get_all(moto_id=None):
        try:
            query = ServiceRecord.query
            if moto_id is not None:
                query = query.filter_by(moto_id=moto_id)
            return query.order_by(ServiceRecord.date.desc(), ServiceRecord.id.desc()).all()
        except Exception as e:
            logging.error(f"Error fetching services: {e}", exc_info=True)
            raise ServiceError("Could not fetch services. Please try again later.", status_code=500)

    @staticmethod
    def get_by_id(service_id):
        try:
            return db.session.get(ServiceRecord, service_id)
        except Exception as e:
            logging.error(f"Error fetching service: {e}", exc_info=True)
            raise ServiceError("Could not fetch service. Please try again later.", status_code=500)

    @staticmethod
    def _check_moto(moto_id):
        if moto_id is not None and db.session.get(Moto, int(moto_id)) is None:
            raise InvalidRequest(f"Moto {moto_id} does not exist")

    @staticmethod
    def create(data, uploaded_image=None):
        ServiceRecordService._check_moto(data.get('moto_id'))
        data = dict(data)
        if uploaded_image:
            data['image_path'] = uploaded_image
        try:
            record = ServiceRecordSchema(session=db.session).load(data)
            db.session.add(record)
            db.session.commit()
            return record
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error creating service: {e}", exc_info=True)
            raise ServiceError("Could not create service. Please try again later.", status_code=500)

    @staticmethod
    def update(service_id, data, uploaded_image=None):
        record = ServiceRecordService.get_by_id(service_id)
        if not record:
            return None
        if 'moto_id' in data:
            ServiceRecordService._check_moto(data.get('moto_id'))

        data = dict(data)
        explicit_given = 'image_path' in data
        explicit = data.pop('image_path', None)
        try:
            ServiceRecordSchema(session=db.session).load(data, instance=record, partial=True)
            record.image_path = merge_image_path(
                record.image_path, explicit, explicit_given, uploaded_image)
            db.session.commit()
            return record
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error updating service: {e}", exc_info=True)
            raise ServiceError("Could not update service. Please try again later.", status_code=500)

    @staticmethod
    def delete(service_id):
        try:
            record = db.session.get(ServiceRecord, service_id)
            if not record:
                return False
            db.session.delete(record)
            db.session.commit()
            return True
        except Exception as e:
            db.session.rollback()
            logging.error(f"Error deleting service: {e}", exc_info=True)
            raise ServiceError("Could not delete service. Please try again later.", status_code=500)
