from datetime import datetime, timedelta
from typing import Optional, Dict

REMINDER_TITLE = 'Lembrete de Agendamento'


def appointment_start(appointment) -> datetime:
    """Naive local datetime at which the appointment begins"""
    return datetime.strptime(f"{appointment.date} {appointment.start_time}", '%Y-%m-%d %H:%M')


def compute_reminder(appointment, now: datetime, lead_minutes: int = 30,
                     evening_hour: int = 20) -> Optional[Dict]:
    """
    Work out when to remind the business of an appointment.

    Appointments on the same day as ``now`` are announced ``lead_minutes``
    before they start; later ones the evening before, at ``evening_hour``.
    Nothing is returned when the appointment does not ask for a reminder or
    when the reminder time has already passed.
    """
    if not appointment.notify:
        return None

    starts_at = appointment_start(appointment)
    hour = appointment.start_time

    if starts_at.date() == now.date():
        notify_at = starts_at - timedelta(minutes=lead_minutes)
        body = f"Você tem um agendamento com {appointment.client_name} em {lead_minutes} minutos!"
    else:
        day_before = starts_at.date() - timedelta(days=1)
        notify_at = datetime(day_before.year, day_before.month, day_before.day, evening_hour)
        body = f"Você tem um agendamento com {appointment.client_name} amanhã às {hour}!"

    if notify_at <= now:
        return None

    return {
        'notify_at': notify_at,
        'title': REMINDER_TITLE,
        'body': body,
        'tag': f"agendamento-{appointment.date}-{hour}"
    }
