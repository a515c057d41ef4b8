from marshmallow import Schema, fields, validate, pre_load, EXCLUDE

from .validators import DATE_VALIDATORS, TIME_VALIDATOR


class AppointmentFormSchema(Schema):
    """
    Schema for the appointment form, used both to create and to edit.
    - client_name is matched case-insensitively against existing clients
      when creating.
    - value is optional; an empty string means "no value".
    """
    client_name = fields.String(
        required=True,
        validate=validate.Length(min=1, max=100),
        metadata={"description": "Client's name."}
    )
    phone = fields.String(
        validate=validate.Length(max=50),
        load_default='',
        metadata={"description": "Client's phone number, optional."}
    )
    date = fields.String(
        required=True,
        validate=DATE_VALIDATORS,
        metadata={"description": "YYYY-MM-DD"}
    )
    start_time = fields.String(
        required=True,
        validate=TIME_VALIDATOR
    )
    end_time = fields.String(
        required=True,
        validate=TIME_VALIDATOR
    )
    value = fields.Float(allow_none=True, load_default=None, validate=validate.Range(min=0))
    notify = fields.Boolean(load_default=False)

    @pre_load
    def clean_form(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ('client_name', 'phone', 'date', 'start_time', 'end_time'):
            if isinstance(data.get(key), str):
                data[key] = data[key].strip()
        if data.get('phone') is None:
            data.pop('phone', None)
        if data.get('value') == '':
            data['value'] = None
        return data


class AppointmentSchema(Schema):
    """Schema for appointment responses"""
    id = fields.Int()
    client_id = fields.Int(allow_none=True)
    client_name = fields.Str()
    phone = fields.Str(allow_none=True)
    date = fields.Str()
    start_time = fields.Str()
    end_time = fields.Str()
    value = fields.Float(allow_none=True)
    notify = fields.Bool()
    completed = fields.Bool()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class ListQuerySchema(Schema):
    """Optional "today" override for the upcoming/history lists"""

    class Meta:
        unknown = EXCLUDE

    today = fields.Date(load_default=None)
