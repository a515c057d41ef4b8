import json

from tests.conftest import make_appointment

FIELDS = ('client_name', 'phone', 'date', 'start_time', 'end_time',
          'value', 'notify', 'completed', 'created_at')


def _appointment_set(gateway):
    return sorted(
        tuple(getattr(a, name) for name in FIELDS)
        for a in gateway.get_all_appointments()
    )


def _client_set(gateway):
    return sorted((c.name, c.phone) for c in gateway.get_clients())


def _populate(gateway):
    ana = gateway.add_client({'name': 'Ana', 'phone': '111'})
    bruno = gateway.add_client({'name': 'Bruno', 'phone': ''})
    make_appointment(gateway, client_id=ana, client_name='Ana', phone='111', value=None)
    make_appointment(gateway, client_id=bruno, client_name='Bruno', phone='',
                     date='2024-12-20', completed=True, notify=True)
    return ana, bruno


def test_export_uses_backup_file_keys(gateway):
    _populate(gateway)

    backup = json.loads(gateway.export_snapshot())

    assert set(backup) == {'clientes', 'agendamentos', 'dataBackup'}
    assert {c['nome'] for c in backup['clientes']} == {'Ana', 'Bruno'}
    record = next(a for a in backup['agendamentos'] if a['nomeCliente'] == 'Bruno')
    assert record['data'] == '2024-12-20'
    assert record['horaInicio'] == '09:00'
    assert record['horaFim'] == '10:00'
    assert record['concluido'] is True
    assert record['notificar'] is True
    assert 'clienteId' in record and 'dataCriacao' in record


def test_export_then_import_reproduces_the_store(gateway):
    _populate(gateway)
    clients_before = _client_set(gateway)
    appointments_before = _appointment_set(gateway)
    backup = gateway.export_snapshot()

    gateway.clear_all()
    assert gateway.import_snapshot(backup) is True

    assert _client_set(gateway) == clients_before
    assert _appointment_set(gateway) == appointments_before


def test_import_keeps_client_references(gateway):
    ana, _ = _populate(gateway)
    backup = gateway.export_snapshot()

    assert gateway.import_snapshot(backup) is True

    client = gateway.get_client(ana)
    assert client.name == 'Ana'
    linked = [a for a in gateway.get_all_appointments() if a.client_id == ana]
    assert [a.client_name for a in linked] == ['Ana']


def test_import_replaces_existing_data(gateway):
    _populate(gateway)
    backup = gateway.export_snapshot()
    gateway.add_client({'name': 'Extra'})
    make_appointment(gateway, client_name='Extra')

    assert gateway.import_snapshot(backup) is True

    assert 'Extra' not in {c.name for c in gateway.get_clients()}
    assert len(gateway.get_all_appointments()) == 2


def test_import_malformed_json_leaves_store_untouched(gateway):
    _populate(gateway)
    before = _appointment_set(gateway)

    assert gateway.import_snapshot('{not json') is False
    assert gateway.import_snapshot('[]') is False
    assert gateway.import_snapshot(json.dumps({'clientes': []})) is False

    assert _appointment_set(gateway) == before


def test_import_with_incomplete_record_is_rejected(gateway):
    _populate(gateway)
    before = _appointment_set(gateway)
    backup = json.dumps({
        'clientes': [{'id': 1, 'nome': 'Ana', 'telefone': '111'}],
        'agendamentos': [{'id': 1, 'clienteId': 1, 'data': '2025-01-10'}],
        'dataBackup': '2025-01-09T10:00:00'
    })

    assert gateway.import_snapshot(backup) is False
    assert _appointment_set(gateway) == before
    assert len(gateway.get_clients()) == 2


def test_storage_failure_mid_import_rolls_back(gateway):
    _populate(gateway)
    clients_before = _client_set(gateway)
    appointments_before = _appointment_set(gateway)
    backup = json.dumps({
        "clientes": [
            {"id": 1, "nome": "Ana", "telefone": ""},
            {"id": 1, "nome": "Ana de novo", "telefone": ""}
        ],
        "agendamentos": []
    })

    assert gateway.import_snapshot(backup) is False

    assert _client_set(gateway) == clients_before
    assert _appointment_set(gateway) == appointments_before


def test_import_rejects_loosely_formatted_dates_and_times(gateway):
    _populate(gateway)
    before = _appointment_set(gateway)
    record = {
        "id": 5, "clienteId": None, "nomeCliente": "Ana", "telefone": "",
        "data": "2025-01-10", "horaInicio": "09:00", "horaFim": "10:00"
    }

    for bad in ({"data": "2025/01/10"}, {"data": "2025-1-10"}, {"data": "2025-02-30"},
                {"horaInicio": "9:00"}, {"horaFim": "25:00"}):
        backup = json.dumps({"clientes": [], "agendamentos": [dict(record, **bad)]})
        assert gateway.import_snapshot(backup) is False, bad

    assert _appointment_set(gateway) == before


def test_import_browser_backup_file(gateway):
    backup = json.dumps({
        'clientes': [{'id': 3, 'nome': 'Carla', 'telefone': ''}],
        'agendamentos': [{
            'id': 8,
            'clienteId': 3,
            'nomeCliente': 'Carla',
            'telefone': '',
            'data': '2025-01-10',
            'horaInicio': '15:00',
            'horaFim': '16:00',
            'valor': None,
            'notificar': False,
            'concluido': False,
            'dataCriacao': '2025-01-08T12:30:00.000Z'
        }],
        'dataBackup': '2025-01-09T08:00:00.000Z'
    })

    assert gateway.import_snapshot(backup) is True

    appointment = gateway.get_appointment(8)
    assert appointment.client_id == 3
    assert appointment.created_at is not None
    assert appointment.created_at.tzinfo is None
    assert [a.id for a in gateway.get_future_appointments()] == [8]
