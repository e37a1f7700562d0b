from motoshop.extensions import db
from sqlalchemy import Numeric


class InvoiceLine(db.Model):
    """
    One billed service inside one generated document. Lines sharing a
    document_path were rendered into the same PDF.
    """
    __tablename__ = 'invoice_line'

    id = db.Column(db.Integer, primary_key=True)
    service_id = db.Column(db.Integer, db.ForeignKey('service.id', ondelete='CASCADE'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    amount = db.Column(Numeric(precision=10, scale=2), nullable=False)
    document_path = db.Column(db.String(500), nullable=False, index=True)
