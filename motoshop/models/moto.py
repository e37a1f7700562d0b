from motoshop.extensions import db
from sqlalchemy.sql import func

class Moto(db.Model):
    __tablename__ = 'moto'

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey('client.id', ondelete='CASCADE'), nullable=False, index=True)
    brand = db.Column(db.String(64), nullable=False)
    model = db.Column(db.String(64), nullable=False)
    year = db.Column(db.Integer, nullable=True)
    plate = db.Column(db.String(32), nullable=True)
    created_at = db.Column(db.DateTime, server_default=func.now())
    services = db.relationship('ServiceRecord', backref='moto', lazy=True, cascade='all, delete-orphan')

    @property
    def client_name(self):
        return self.client.name if self.client else None
