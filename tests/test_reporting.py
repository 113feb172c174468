# tests/test_reporting.py
import json

import pandas as pd
import pytest
from parkdash.reporting import DashboardReporter

from conftest import CLIENT_EMAIL

@pytest.fixture
def reporter(aggregator, sqlite_store, camera_id, make_car):
    sqlite_store.add_car_detection(camera_id, make_car('a', zone='S1', duration=600))
    sqlite_store.add_car_detection(camera_id, make_car(
        'b', zone='S2', duration=900, time_in_zone=720, infraction=True, infraction_type='no_permit'
    ))
    return DashboardReporter(aggregator)

def test_generate_report(reporter):
    report = reporter.generate_report(CLIENT_EMAIL, 24)
    assert report['window_hours'] == 24
    assert report['stats']['parkingUtilization']['used'] == 2
    assert report['stats']['infringements'] == {'count': 1, 'rate': 33}
    assert [row['car_id'] for row in report['infractions']] == ['b']

def test_format_report(reporter):
    text = reporter.format_report(reporter.generate_report(CLIENT_EMAIL, 24))
    assert 'Spots used: 2 of 10' in text
    assert 'Utilization: 20%' in text
    assert 'no_permit in spot S2, 12.00 minutes' in text

def test_save_json_report(reporter, tmp_path):
    path = str(tmp_path / 'report.json')
    reporter.save_report(reporter.generate_report(CLIENT_EMAIL, 24), path)

    with open(path) as f:
        saved = json.load(f)
    assert saved['stats']['totalSpots'] == 10

def test_save_csv_report(reporter, tmp_path):
    path = str(tmp_path / 'infractions.csv')
    reporter.save_report(reporter.generate_report(CLIENT_EMAIL, 24), path)

    df = pd.read_csv(path)
    assert list(df.columns)[:3] == ['car_id', 'license_plate', 'dur_in_minutes']
    assert df['car_id'].tolist() == ['b']
    assert df['minutes_parked'].tolist() == [12.0]

def test_save_csv_report_without_infractions(aggregator, tmp_path):
    reporter = DashboardReporter(aggregator)
    path = str(tmp_path / 'empty.csv')
    reporter.save_report(reporter.generate_report('nobody@example.com', 24), path)

    assert pd.read_csv(path).empty
