# services/storage_gateway.py
from contextlib import contextmanager
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError

from .. import db, logger
from ..models import Client, Appointment
from ..schemas.backup_schema import BackupSchema


class AppointmentNotFound(LookupError):
    """Raised when an appointment id has no stored record"""

    def __init__(self, appointment_id):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment with ID {appointment_id} not found")


class StorageGateway:
    """
    Persistence for clients and appointments.

    The gateway owns an explicit session handle instead of reaching for a
    global one, and opens the store lazily: every public operation calls
    ``open()`` first, which creates the tables once.

    Only ``clear_all`` and ``import_snapshot`` span more than one write, and
    both run inside a single transaction. Every other write commits on its
    own. Storage errors roll the session back and propagate to the caller.
    """

    def __init__(self, session, clock: Optional[Callable[[], date]] = None):
        self.session = session
        self.clock = clock or date.today
        self.is_open = False

    def open(self) -> None:
        """Create the clients and appointments tables if needed. Idempotent."""
        if self.is_open:
            return
        db.Model.metadata.create_all(
            bind=self.session.get_bind(),
            tables=[Client.__table__, Appointment.__table__]
        )
        self.is_open = True
        logger.info("Storage gateway opened")

    @contextmanager
    def _transaction(self):
        """Commit everything done in the block, or roll it all back"""
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _today(self, today=None) -> str:
        if today is None:
            today = self.clock()
        if isinstance(today, (date, datetime)):
            return today.strftime('%Y-%m-%d')
        return today

    # Clients

    def add_client(self, record: Dict) -> int:
        """Insert a client and return its new id. Names are not unique here."""
        self.open()
        client = Client(
            name=record['name'],
            phone=record.get('phone') or ''
        )
        with self._transaction():
            self.session.add(client)
        logger.info(f"Client created: {client}")
        return client.id

    def get_clients(self) -> List[Client]:
        self.open()
        return self.session.query(Client).all()

    def get_client(self, client_id: int) -> Optional[Client]:
        self.open()
        return self.session.get(Client, client_id)

    def find_client_by_name(self, name: str) -> Optional[Client]:
        """Case-insensitive exact match on the client's name"""
        self.open()
        return self.session.query(Client).filter(
            func.lower(Client.name) == name.lower()
        ).first()

    # Appointments

    def add_appointment(self, record: Dict) -> int:
        """Insert an appointment and return its new id"""
        self.open()
        appointment = Appointment(
            client_id=record.get('client_id'),
            client_name=record['client_name'],
            phone=record.get('phone'),
            date=record['date'],
            start_time=record['start_time'],
            end_time=record['end_time'],
            value=record.get('value'),
            notify=bool(record.get('notify', False)),
            completed=bool(record.get('completed', False)),
            created_at=record.get('created_at') or datetime.now()
        )
        with self._transaction():
            self.session.add(appointment)
        logger.info(f"Appointment created: {appointment}")
        return appointment.id

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        self.open()
        return self.session.get(Appointment, appointment_id)

    def get_all_appointments(self) -> List[Appointment]:
        self.open()
        return self.session.query(Appointment).all()

    def get_future_appointments(self, today=None) -> List[Appointment]:
        """Appointments on or after today that are not completed, soonest first"""
        self.open()
        today = self._today(today)
        return self.session.query(Appointment).filter(
            Appointment.date >= today,
            Appointment.completed.is_(False)
        ).order_by(
            Appointment.date.asc(),
            Appointment.start_time.asc()
        ).all()

    def get_history_appointments(self, today=None) -> List[Appointment]:
        """Past or completed appointments, most recent first"""
        self.open()
        today = self._today(today)
        return self.session.query(Appointment).filter(
            or_(
                Appointment.date < today,
                Appointment.completed.is_(True)
            )
        ).order_by(
            Appointment.date.desc(),
            Appointment.start_time.desc()
        ).all()

    def update_appointment(self, record: Dict) -> Appointment:
        """
        Replace the stored fields named in ``record``.

        Args:
            record: Dictionary with an ``id`` plus the fields to write. Every
                replaceable field present is overwritten, ``None`` included;
                fields absent from the record keep their stored value.

        Returns:
            The updated Appointment

        Raises:
            ValueError: If the record carries no id
            AppointmentNotFound: If no appointment has that id
        """
        self.open()
        appointment_id = record.get('id')
        if appointment_id is None:
            raise ValueError("Appointment record has no id")

        appointment = self.session.get(Appointment, appointment_id)
        if appointment is None:
            raise AppointmentNotFound(appointment_id)

        with self._transaction():
            for key in Appointment.REPLACEABLE_FIELDS:
                if key in record:
                    setattr(appointment, key, record[key])
        logger.info(f"Appointment updated: {appointment}")
        return appointment

    def mark_completed(self, appointment_id: int) -> Appointment:
        self.open()
        appointment = self.session.get(Appointment, appointment_id)
        if appointment is None:
            raise AppointmentNotFound(appointment_id)

        with self._transaction():
            appointment.completed = True
        logger.info(f"Appointment {appointment_id} marked as completed")
        return appointment

    def delete_appointment(self, appointment_id: int) -> None:
        """Delete by id. Deleting a missing id is not an error."""
        self.open()
        with self._transaction():
            deleted = self.session.query(Appointment).filter(
                Appointment.id == appointment_id
            ).delete(synchronize_session='fetch')
        logger.info(f"Deleted {deleted} appointment(s) with ID {appointment_id}")

    # Snapshots

    def export_snapshot(self) -> str:
        """Serialize every client and appointment to a backup JSON string"""
        self.open()
        snapshot = {
            'clients': self.get_clients(),
            'appointments': self.get_all_appointments(),
            'exported_at': datetime.now()
        }
        return BackupSchema().dumps(snapshot)

    def import_snapshot(self, serialized) -> bool:
        """
        Replace the whole store with the contents of a backup.

        The wipe and every insert share one transaction, so a failure leaves
        the store exactly as it was. Identifiers present in the backup are
        kept so appointments still point at their clients.

        Returns:
            True on success, False if the backup could not be parsed or
            written. Errors are logged, never raised.
        """
        try:
            self.open()
            snapshot = BackupSchema().loads(serialized)
            with self._transaction():
                self._wipe()
                for record in snapshot['clients']:
                    self.session.add(Client(
                        id=record['id'],
                        name=record['name'],
                        phone=record['phone'] or ''
                    ))
                self.session.flush()
                for record in snapshot['appointments']:
                    self.session.add(self._appointment_from_backup(record))
            logger.info(
                f"Backup imported: {len(snapshot['clients'])} clients, "
                f"{len(snapshot['appointments'])} appointments"
            )
            return True
        except Exception as e:
            logger.error(f"Error importing backup: {str(e)}")
            return False

    @staticmethod
    def _appointment_from_backup(record: Dict) -> Appointment:
        created_at = record['created_at']
        if created_at is None:
            created_at = datetime.now()
        elif created_at.tzinfo is not None:
            created_at = created_at.astimezone().replace(tzinfo=None)

        return Appointment(
            id=record['id'],
            client_id=record['client_id'],
            client_name=record['client_name'],
            phone=record['phone'],
            date=record['date'],
            start_time=record['start_time'],
            end_time=record['end_time'],
            value=record['value'],
            notify=record['notify'],
            completed=record['completed'],
            created_at=created_at
        )

    def _wipe(self) -> None:
        # Appointments first, they reference clients
        self.session.query(Appointment).delete(synchronize_session='fetch')
        self.session.query(Client).delete(synchronize_session='fetch')

    def clear_all(self) -> None:
        """Empty both collections in one transaction"""
        self.open()
        try:
            with self._transaction():
                self._wipe()
        except SQLAlchemyError as e:
            logger.error(f"Error clearing the store: {str(e)}")
            raise
        logger.info("All clients and appointments removed")


def get_gateway() -> StorageGateway:
    """The gateway registered on the current application"""
    from flask import current_app
    return current_app.extensions['storage_gateway']
