from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey

from . import BaseModel


class Appointment(BaseModel):
    """
    A scheduled service for a client.

    The client's name and phone are copied at creation time and are not kept
    in sync with the Client row. Whether an appointment is upcoming or part of
    the history is never stored: it is derived from ``date`` and
    ``completed`` when the lists are queried.
    """
    __tablename__ = 'appointments'

    client_id = Column(Integer, ForeignKey('clients.id'), nullable=True, index=True)

    client_name = Column(String(100), nullable=False)
    phone = Column(String(50), nullable=True)

    # Naive local calendar values, compared as strings
    date = Column(String(10), nullable=False, index=True, doc="YYYY-MM-DD")
    start_time = Column(String(5), nullable=False, doc="HH:MM")
    end_time = Column(String(5), nullable=False, doc="HH:MM")

    value = Column(Float, nullable=True)
    notify = Column(Boolean, nullable=False, default=False)
    completed = Column(Boolean, nullable=False, default=False, index=True)

    # Fields a full-record replace may write
    REPLACEABLE_FIELDS = (
        'client_id', 'client_name', 'phone', 'date', 'start_time',
        'end_time', 'value', 'notify', 'completed', 'created_at'
    )

    @property
    def status_label(self):
        return 'Concluído' if self.completed else 'Cancelado'

    def __repr__(self):
        return f"<Appointment {self.id} {self.client_name} {self.date} {self.start_time}>"
