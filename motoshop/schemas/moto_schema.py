from marshmallow import EXCLUDE, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from motoshop.models.moto import Moto

class MotoSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Moto
        load_instance = True
        unknown = EXCLUDE
        include_fk = True
    id = auto_field(dump_only=True)
    client_id = auto_field(required=True)
    brand = auto_field(required=True, validate=validate.Length(min=1, error='brand is required'))
    model = auto_field(required=True, validate=validate.Length(min=1, error='model is required'))
    year = auto_field()
    plate = auto_field()
    created_at = auto_field(dump_only=True)
    client_name = fields.String(dump_only=True)
