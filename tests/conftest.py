# tests/conftest.py
import copy
import json
import pytest

from parkdash.config_loader import DEFAULT_CONFIG
from parkdash.stats.aggregator import StatsAggregator
from parkdash.stats.models import CarDetectionRecord
from parkdash.storage.sqlite_storage import SQLiteDashboardStore
from parkdash.web.app import create_app

NOW = 1_700_000_000
CLIENT_EMAIL = 'operator@example.com'


def spots_descriptor(count: int) -> str:
    return json.dumps([{'name': f'S{i}', 'points': [[0, 0], [10, 10]]} for i in range(count)])


@pytest.fixture
def temp_db_path(tmp_path):
    return str(tmp_path / 'dashboard.db')


@pytest.fixture
def sqlite_store(temp_db_path):
    store = SQLiteDashboardStore(temp_db_path)
    store.initialize()
    return store


@pytest.fixture
def camera_id(sqlite_store):
    """Camera tracking 10 spots for CLIENT_EMAIL's location"""
    location_id = sqlite_store.add_location(CLIENT_EMAIL)
    return sqlite_store.add_camera(location_id, spots_descriptor(10))


@pytest.fixture
def make_car():
    def _make_car(car_id, zone='S0', duration=600, time_in_zone=600,
                  infraction=False, infraction_type=None, approved=False, age=3600):
        return CarDetectionRecord(
            car_id=car_id,
            license_plate=f'PL-{car_id}',
            zone=zone,
            duration=duration,
            time_in_zone=time_in_zone,
            infraction_occurred=infraction,
            infraction_type=infraction_type,
            approved=approved,
            timestamp_first_detected=NOW - age
        )
    return _make_car


@pytest.fixture
def aggregator(sqlite_store):
    return StatsAggregator(sqlite_store, clock=lambda: NOW)


@pytest.fixture
def test_config(temp_db_path):
    config = copy.deepcopy(DEFAULT_CONFIG)
    config['database']['path'] = temp_db_path
    config['web']['secret_key'] = 'test-secret'
    return config


@pytest.fixture
def app(test_config, sqlite_store, aggregator):
    app = create_app(test_config, store=sqlite_store, aggregator=aggregator)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in_client(client):
    with client.session_transaction() as sess:
        sess['clientEmail'] = CLIENT_EMAIL
        sess['clientName'] = 'Operator'
    return client
