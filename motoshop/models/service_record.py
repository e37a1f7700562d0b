from motoshop.extensions import db
from sqlalchemy import Numeric, false
from sqlalchemy.sql import func

class ServiceRecord(db.Model):
    """A billable repair/maintenance event on one moto."""
    __tablename__ = 'service'

    id = db.Column(db.Integer, primary_key=True)
    moto_id = db.Column(db.Integer, db.ForeignKey('moto.id', ondelete='CASCADE'), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.Date, nullable=False)
    cost = db.Column(Numeric(precision=10, scale=2), nullable=False, default=0)
    completed = db.Column(db.Boolean, default=False, nullable=False, server_default=false())
    # Comma-separated list of absolute URLs and/or site-relative paths
    image_path = db.Column(db.String(2000), nullable=True)
    created_at = db.Column(db.DateTime, server_default=func.now())
    invoice_lines = db.relationship('InvoiceLine', backref='service', lazy=True, cascade='all, delete-orphan')

    @property
    def image_refs(self):
        if not self.image_path:
            return []
        return [p.strip() for p in self.image_path.split(',') if p.strip()]
