from marshmallow import EXCLUDE, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from motoshop.models.service_record import ServiceRecord


def _moto_attr(name):
    return fields.Function(lambda obj: getattr(obj.moto, name, None) if obj.moto else None, dump_only=True)


class ServiceRecordSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = ServiceRecord
        load_instance = True
        unknown = EXCLUDE
        include_fk = True
    id = auto_field(dump_only=True)
    moto_id = auto_field(required=True)
    description = auto_field(required=True, validate=validate.Length(min=1, error='description is required'))
    date = auto_field(required=True)
    cost = auto_field(required=True, validate=validate.Range(min=0, error='cost must be non-negative'))
    completed = auto_field()
    image_path = auto_field()
    created_at = auto_field(dump_only=True)

    # moto summary (left join semantics: None when the moto is gone)
    plate = _moto_attr('plate')
    brand = _moto_attr('brand')
    model = _moto_attr('model')
    images = fields.List(fields.String(), attribute='image_refs', dump_only=True)
