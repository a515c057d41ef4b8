# models/client.py

from agenda import db
from . import BaseModel


class Client(BaseModel):
    __tablename__ = 'clients'

    name = db.Column(db.String(100), nullable=False, index=True)
    phone = db.Column(db.String(50), nullable=False, default='', index=True)

    def __repr__(self):
        return f"<Client {self.name} - {self.phone}>"
