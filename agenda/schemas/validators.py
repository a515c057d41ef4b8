from datetime import datetime

from marshmallow import validate, ValidationError

# Dates and times are stored as typed and compared as strings, so only the
# zero-padded forms are accepted.
DATE_PATTERN = r'^\d{4}-\d{2}-\d{2}$'
TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'


def calendar_date(value):
    """Reject well-formed strings that are not real dates, e.g. 2025-02-30"""
    try:
        datetime.strptime(value, '%Y-%m-%d')
    except ValueError:
        raise ValidationError("Date must be YYYY-MM-DD")


DATE_VALIDATORS = [
    validate.Regexp(DATE_PATTERN, error="Date must be YYYY-MM-DD"),
    calendar_date,
]
TIME_VALIDATOR = validate.Regexp(TIME_PATTERN, error="Time must be HH:MM")
