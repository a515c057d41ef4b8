import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from agenda.models import Appointment
from agenda.services.storage_gateway import AppointmentNotFound
from tests.conftest import make_appointment


def _ids(appointments):
    return [a.id for a in appointments]


def test_open_is_idempotent(gateway):
    gateway.open()
    gateway.open()
    assert gateway.is_open
    assert gateway.get_clients() == []


def test_add_client_assigns_fresh_ids(gateway):
    first = gateway.add_client({'name': 'Ana', 'phone': '123'})
    second = gateway.add_client({'name': 'Ana'})

    assert first != second
    clients = {c.id: c for c in gateway.get_clients()}
    assert set(clients) == {first, second}
    assert clients[first].phone == '123'
    assert clients[second].phone == ''


def test_find_client_by_name_ignores_case(gateway):
    client_id = gateway.add_client({'name': 'Joana Lima', 'phone': ''})

    assert gateway.find_client_by_name('joana lima').id == client_id
    assert gateway.find_client_by_name('JOANA LIMA').id == client_id
    assert gateway.find_client_by_name('Joana') is None


def test_add_appointment_defaults(gateway):
    appointment_id = make_appointment(gateway, completed=None, notify=None)
    appointment = gateway.get_appointment(appointment_id)

    assert appointment.completed is False
    assert appointment.notify is False
    assert appointment.created_at is not None


def test_get_appointment_missing_returns_none(gateway):
    assert gateway.get_appointment(999) is None


def test_future_and_history_partition(gateway):
    future = make_appointment(gateway, date='2025-01-10')
    today = make_appointment(gateway, date='2025-01-09')
    past = make_appointment(gateway, date='2025-01-08')
    done_future = make_appointment(gateway, date='2025-02-01', completed=True)
    done_past = make_appointment(gateway, date='2024-12-01', completed=True)

    future_ids = set(_ids(gateway.get_future_appointments()))
    history_ids = set(_ids(gateway.get_history_appointments()))

    assert future_ids == {future, today}
    assert history_ids == {past, done_future, done_past}
    assert not future_ids & history_ids


def test_future_sorted_by_date_then_start_time(gateway):
    c = make_appointment(gateway, date='2025-01-12', start_time='08:00')
    b = make_appointment(gateway, date='2025-01-10', start_time='14:30')
    a = make_appointment(gateway, date='2025-01-10', start_time='09:00')

    assert _ids(gateway.get_future_appointments()) == [a, b, c]


def test_history_sorted_most_recent_first(gateway):
    a = make_appointment(gateway, date='2025-01-01', start_time='08:00')
    b = make_appointment(gateway, date='2025-01-05', start_time='09:00')
    c = make_appointment(gateway, date='2025-01-05', start_time='16:00')

    assert _ids(gateway.get_history_appointments()) == [c, b, a]


def test_appointment_moves_to_history_when_its_day_passes(gateway):
    appointment_id = make_appointment(gateway, date='2025-01-10', start_time='09:00')

    assert _ids(gateway.get_future_appointments('2025-01-09')) == [appointment_id]
    assert gateway.get_history_appointments('2025-01-09') == []

    assert gateway.get_future_appointments('2025-01-11') == []
    assert _ids(gateway.get_history_appointments('2025-01-11')) == [appointment_id]


def test_mark_completed_missing_raises(gateway):
    with pytest.raises(AppointmentNotFound):
        gateway.mark_completed(42)


def test_mark_completed_only_changes_completed(gateway):
    appointment_id = make_appointment(gateway, notify=True, value=55.5)
    before = gateway.get_appointment(appointment_id)
    snapshot = (before.client_name, before.phone, before.date, before.start_time,
                before.end_time, before.value, before.notify, before.created_at)

    gateway.mark_completed(appointment_id)

    after = gateway.get_appointment(appointment_id)
    assert after.completed is True
    assert (after.client_name, after.phone, after.date, after.start_time,
            after.end_time, after.value, after.notify, after.created_at) == snapshot
    assert appointment_id in _ids(gateway.get_history_appointments())


def test_update_requires_id(gateway):
    with pytest.raises(ValueError):
        gateway.update_appointment({'client_name': 'Nobody'})


def test_update_missing_record_does_not_create(gateway):
    with pytest.raises(AppointmentNotFound):
        gateway.update_appointment({'id': 7, 'client_name': 'Ghost'})
    assert gateway.get_all_appointments() == []


def test_update_replaces_fields(gateway):
    appointment_id = make_appointment(gateway)

    gateway.update_appointment({
        'id': appointment_id,
        'client_name': 'Maria S.',
        'date': '2025-01-15',
        'start_time': '11:00',
        'end_time': '12:00',
        'value': None,
    })

    updated = gateway.get_appointment(appointment_id)
    assert updated.client_name == 'Maria S.'
    assert updated.date == '2025-01-15'
    assert updated.start_time == '11:00'
    assert updated.value is None
    assert updated.phone == '11987654321'


def test_delete_is_idempotent(gateway):
    appointment_id = make_appointment(gateway)

    gateway.delete_appointment(appointment_id)
    gateway.delete_appointment(appointment_id)

    assert gateway.get_appointment(appointment_id) is None


def test_clear_all_empties_both_collections(gateway):
    gateway.add_client({'name': 'Ana'})
    make_appointment(gateway)

    gateway.clear_all()

    assert gateway.get_clients() == []
    assert gateway.get_all_appointments() == []


def test_completed_today_is_history(gateway):
    appointment_id = make_appointment(gateway, date='2025-01-09', completed=True)

    assert gateway.get_future_appointments() == []
    assert _ids(gateway.get_history_appointments()) == [appointment_id]


def test_clear_all_failure_keeps_everything(gateway, monkeypatch):
    gateway.add_client({'name': 'Ana'})
    appointment_id = make_appointment(gateway)

    def wipe_then_fail():
        gateway.session.query(Appointment).delete(synchronize_session='fetch')
        raise OperationalError('DELETE FROM clients', {}, Exception('disk I/O error'))

    monkeypatch.setattr(gateway, '_wipe', wipe_then_fail)

    with pytest.raises(SQLAlchemyError):
        gateway.clear_all()

    assert [c.name for c in gateway.get_clients()] == ['Ana']
    assert _ids(gateway.get_all_appointments()) == [appointment_id]
