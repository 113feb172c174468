# tests/test_cli.py
import json

import pytest
import yaml
from click.testing import CliRunner
from parkdash.cli import cli, DEMO_EMAIL

@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump({
        'database': {'path': str(tmp_path / 'cli.db')},
        'logging': {'version': 1, 'disable_existing_loggers': False},
    }))
    return str(path)

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def seeded(runner, config_path):
    result = runner.invoke(cli, ['-c', config_path, 'init-db', '--demo'])
    assert result.exit_code == 0, result.output
    return config_path

def test_init_db(runner, config_path):
    result = runner.invoke(cli, ['-c', config_path, 'init-db'])
    assert result.exit_code == 0
    assert 'Initialized database' in result.output

def test_stats_for_demo_client(runner, seeded):
    result = runner.invoke(cli, ['-c', seeded, 'stats', '-e', DEMO_EMAIL, '--hours', '24'])
    assert result.exit_code == 0, result.output

    stats = json.loads(result.output)
    assert stats['totalSpots'] == 4
    assert stats['footTraffic'] == 5
    assert stats['parkingUtilization'] == {'used': 3, 'available': 1, 'percentage': 75}
    assert stats['infringements'] == {'count': 2, 'rate': 40}

def test_stats_for_unknown_client(runner, seeded):
    result = runner.invoke(cli, ['-c', seeded, 'stats', '-e', 'nobody@example.com', '--history'])
    assert result.exit_code == 0
    assert json.loads(result.output)['totalSpots'] == 0

def test_stats_rejects_non_positive_hours(runner, seeded):
    result = runner.invoke(cli, ['-c', seeded, 'stats', '-e', DEMO_EMAIL, '--hours', '0'])
    assert result.exit_code != 0

def test_infractions_and_approve(runner, seeded):
    result = runner.invoke(cli, ['-c', seeded, 'infractions', '-e', DEMO_EMAIL])
    rows = json.loads(result.output)
    assert [row['license_plate'] for row in rows] == ['XYZ789', 'LMN456']

    result = runner.invoke(cli, ['-c', seeded, 'approve', rows[0]['car_id']])
    assert result.exit_code == 0
    assert 'Approved' in result.output

    result = runner.invoke(cli, ['-c', seeded, 'infractions', '-e', DEMO_EMAIL])
    assert len(json.loads(result.output)) == 1

def test_approve_unknown_car(runner, seeded):
    result = runner.invoke(cli, ['-c', seeded, 'approve', 'missing'])
    assert result.exit_code == 1
    assert 'No car detection found' in result.output

def test_report_to_file(runner, seeded, tmp_path):
    output = str(tmp_path / 'report.json')
    result = runner.invoke(cli, ['-c', seeded, 'report', '-e', DEMO_EMAIL, '-o', output])
    assert result.exit_code == 0

    with open(output) as f:
        assert json.load(f)['stats']['totalSpots'] == 4

def test_report_to_stdout(runner, seeded):
    result = runner.invoke(cli, ['-c', seeded, 'report', '-e', DEMO_EMAIL])
    assert result.exit_code == 0
    assert 'Parking Dashboard Report' in result.output
