from typing import Dict

from agenda import logger
from agenda.models import Appointment
from .client_service import find_or_create_client
from .storage_gateway import StorageGateway, AppointmentNotFound

# Form fields an edit is allowed to change
EDITABLE_FIELDS = ('client_name', 'phone', 'date', 'start_time', 'end_time', 'value', 'notify')


class AppointmentService:
    """Create and edit appointments from validated form data"""

    @staticmethod
    def create_appointment(gateway: StorageGateway, data: Dict) -> Appointment:
        """
        Create a new appointment

        Args:
            gateway: Storage gateway to write through
            data: Validated form data (see AppointmentFormSchema)

        Returns:
            Created Appointment instance
        """
        client = find_or_create_client(gateway, data['client_name'], data.get('phone'))
        logger.info(f"Client found/created: {client}")

        appointment_id = gateway.add_appointment({
            'client_id': client.id,
            'client_name': data['client_name'],
            'phone': data.get('phone'),
            'date': data['date'],
            'start_time': data['start_time'],
            'end_time': data['end_time'],
            'value': data.get('value'),
            'notify': data.get('notify', False),
            'completed': False
        })
        return gateway.get_appointment(appointment_id)

    @staticmethod
    def edit_appointment(gateway: StorageGateway, appointment_id: int, data: Dict) -> Appointment:
        """Overwrite the editable fields of an existing appointment"""
        appointment = gateway.get_appointment(appointment_id)
        if appointment is None:
            raise AppointmentNotFound(appointment_id)

        record = {'id': appointment_id}
        for key in EDITABLE_FIELDS:
            if key in data:
                record[key] = data[key]
        return gateway.update_appointment(record)
