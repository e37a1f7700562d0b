from marshmallow import EXCLUDE, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from motoshop.models.client import Client

class ClientSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = Client
        load_instance = True
        unknown = EXCLUDE
    id = auto_field(dump_only=True)
    name = auto_field(required=True, validate=validate.Length(min=1, error='name is required'))
    phone = auto_field()
    address = auto_field()
    created_at = auto_field(dump_only=True)
