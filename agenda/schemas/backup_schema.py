from marshmallow import Schema, fields, EXCLUDE

from .validators import DATE_VALIDATORS, TIME_VALIDATOR


class ClientBackupSchema(Schema):
    """Client record as written in backup files"""

    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True, load_default=None)
    name = fields.String(data_key='nome', required=True)
    phone = fields.String(data_key='telefone', allow_none=True, load_default='')


class AppointmentBackupSchema(Schema):
    """Appointment record as written in backup files"""

    class Meta:
        unknown = EXCLUDE

    id = fields.Int(allow_none=True, load_default=None)
    client_id = fields.Int(data_key='clienteId', allow_none=True, load_default=None)
    client_name = fields.String(data_key='nomeCliente', required=True)
    phone = fields.String(data_key='telefone', allow_none=True, load_default=None)
    date = fields.String(data_key='data', required=True, validate=DATE_VALIDATORS)
    start_time = fields.String(data_key='horaInicio', required=True, validate=TIME_VALIDATOR)
    end_time = fields.String(data_key='horaFim', required=True, validate=TIME_VALIDATOR)
    value = fields.Float(data_key='valor', allow_none=True, load_default=None)
    notify = fields.Boolean(data_key='notificar', load_default=False)
    completed = fields.Boolean(data_key='concluido', load_default=False)
    created_at = fields.DateTime(data_key='dataCriacao', allow_none=True, load_default=None)


class BackupSchema(Schema):
    """
    Full snapshot of the store.

    Keys follow the backup files the browser version of the agenda produced,
    so those files can still be restored:
    ``{"clientes": [...], "agendamentos": [...], "dataBackup": "..."}``
    """

    class Meta:
        unknown = EXCLUDE

    clients = fields.List(fields.Nested(ClientBackupSchema), data_key='clientes', required=True)
    appointments = fields.List(fields.Nested(AppointmentBackupSchema), data_key='agendamentos', required=True)
    exported_at = fields.DateTime(data_key='dataBackup', allow_none=True, load_default=None)
