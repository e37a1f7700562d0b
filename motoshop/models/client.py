from motoshop.extensions import db
from sqlalchemy.sql import func

class Client(db.Model):
    __tablename__ = 'client'

    id = db.Column(db.Integer, primary_key=True, index=True)
    name = db.Column(db.String(128), nullable=False)
    phone = db.Column(db.String(32), nullable=True)
    address = db.Column(db.String(256), nullable=True)
    created_at = db.Column(db.DateTime, server_default=func.now())
    motos = db.relationship('Moto', backref='client', lazy=True, cascade='all, delete-orphan')
