import importlib
import sys

import agenda


def test_entry_point_uses_the_factory_migrate(monkeypatch):
    monkeypatch.setenv('FLASK_ENV', 'testing')
    sys.modules.pop('run', None)

    run = importlib.import_module('run')
    try:
        assert run.app.config['TESTING'] is True
        assert run.app.extensions['migrate'].migrate is agenda.migrate
        assert run.app.extensions['migrate'].db is agenda.db
    finally:
        sys.modules.pop('run', None)
