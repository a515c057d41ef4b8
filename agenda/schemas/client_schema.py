from marshmallow import Schema, fields, validate, pre_load


class ClientSchema(Schema):
    """
    Schema for Client serialization/deserialization.
    Phone is optional and stored as an empty string when missing.
    """
    id = fields.Int(dump_only=True)
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    phone = fields.String(validate=validate.Length(max=50), load_default='')
    created_at = fields.DateTime(dump_only=True)

    @pre_load
    def strip_fields(self, data, **kwargs):
        """Trim surrounding whitespace and normalize a null phone"""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get('name'), str):
            data['name'] = data['name'].strip()
        if data.get('phone') is None:
            data.pop('phone', None)
        elif isinstance(data['phone'], str):
            data['phone'] = data['phone'].strip()
        return data
