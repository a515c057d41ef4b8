# models/__init__.py
from .. import db
from datetime import datetime


class BaseModel(db.Model):
    """
    Base model with common fields for all models
    """
    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)


# Import order matters
from .client import Client
from .appointment import Appointment
