import os
from marshmallow import fields
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field
from motoshop.models.invoice_line import InvoiceLine


class InvoiceLineSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = InvoiceLine
        load_instance = True
        include_fk = True
    id = auto_field(dump_only=True)
    service_id = auto_field()
    date = auto_field()
    amount = auto_field()
    document_path = auto_field()
    # file name inside the invoices directory, usable with /api/invoices/documents/<name>
    document = fields.Function(lambda obj: os.path.basename(obj.document_path or ''), dump_only=True)
