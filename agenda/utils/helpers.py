from datetime import datetime


def format_date_br(value):
    """'2025-01-10' -> '10/01/2025'"""
    return datetime.strptime(value, '%Y-%m-%d').strftime('%d/%m/%Y')


def format_time_range(appointment):
    return f"{appointment.start_time} - {appointment.end_time}"


def format_value(value, currency_symbol=None):
    """
    Two-decimal money text, or an empty string when there is no value.
    A zero value counts as no value.
    """
    if not value:
        return ''
    if currency_symbol:
        return f"{currency_symbol} {value:.2f}"
    return f"{value:.2f}"


def now():
    """Current naive local time"""
    return datetime.now()
