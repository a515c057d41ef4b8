from datetime import date

import pytest

from agenda import create_app, db
from agenda.services.storage_gateway import StorageGateway

TODAY = date(2025, 1, 9)


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def gateway(app):
    """A gateway whose "today" is fixed at 2025-01-09"""
    return StorageGateway(db.session, clock=lambda: TODAY)


def make_appointment(gateway, **overrides):
    record = {
        'client_id': None,
        'client_name': 'Maria Souza',
        'phone': '11987654321',
        'date': '2025-01-10',
        'start_time': '09:00',
        'end_time': '10:00',
        'value': 80.0,
        'notify': False,
        'completed': False,
    }
    record.update(overrides)
    return gateway.add_appointment(record)
