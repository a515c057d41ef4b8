from marshmallow import ValidationError
from .schemas.appointment_schemas import AppointmentFormSchema, ListQuerySchema


def validate_appointment_input(data):
    schema = AppointmentFormSchema()
    try:
        validated_data = schema.load(data)
        return validated_data, None
    except ValidationError as err:
        return None, err.messages


def parse_list_query(args):
    """Return the ``today`` override from query args, or None"""
    return ListQuerySchema().load(args)['today']
