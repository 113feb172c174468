import json
import time
import uuid
import logging

import bcrypt
import click

from .config_loader import load_config
from .logging_config import setup_logging
from .reporting import DashboardReporter
from .stats.aggregator import StatsAggregator
from .stats.models import CarDetectionRecord, PersonDetectionRecord
from .storage.sqlite_storage import SQLiteDashboardStore

logger = logging.getLogger(__name__)

DEMO_EMAIL = 'demo@example.com'
DEMO_PASSWORD = 'demo'


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Path to configuration file')
@click.pass_context
def cli(ctx, config):
    """Parking and foot traffic dashboard"""
    try:
        cfg = load_config(config)
    except Exception as e:
        raise click.ClickException(f"Could not load configuration: {str(e)}")
    setup_logging(config=cfg)
    ctx.obj = cfg


def _store(cfg) -> SQLiteDashboardStore:
    store = SQLiteDashboardStore(cfg['database']['path'])
    store.initialize()
    return store


def _aggregator(cfg) -> StatsAggregator:
    return StatsAggregator(
        _store(cfg),
        spot_marker=cfg['dashboard']['spot_marker'],
        infractions_limit=cfg['dashboard']['infractions_limit']
    )


@cli.command()
@click.option('--host', help='Interface to bind (overrides config)')
@click.option('--port', type=int, help='Port to listen on (overrides config)')
@click.pass_obj
def serve(cfg, host, port):
    """Run the dashboard web server"""
    from .web.app import create_app

    app = create_app(cfg)
    app.run(
        host=host or cfg['web']['host'],
        port=port or cfg['web']['port'],
        debug=cfg['web']['debug']
    )


@cli.command('init-db')
@click.option('--demo', is_flag=True, help='Seed a demo client with sample detections')
@click.pass_obj
def init_db(cfg, demo):
    """Create the dashboard tables"""
    store = _store(cfg)
    click.echo(f"Initialized database at {store.db_path}")
    if demo:
        _seed_demo(store)
        click.echo(f"Seeded demo client {DEMO_EMAIL} (password: {DEMO_PASSWORD})")


@cli.command()
@click.option('--email', '-e', required=True, help='Client email identifying the location')
@click.option('--hours', '-h', type=click.IntRange(min=1), help='Lookback window in hours')
@click.option('--history', is_flag=True, help='Use the all-time window')
@click.pass_obj
def stats(cfg, email, hours, history):
    """Print dashboard statistics as JSON"""
    if history:
        hours = cfg['dashboard']['history_hours']
    result = _aggregator(cfg).compute_stats(email, hours or cfg['dashboard']['default_hours'])
    click.echo(json.dumps(result.to_dict(), indent=2))


@cli.command()
@click.option('--email', '-e', required=True, help='Client email identifying the location')
@click.option('--hours', '-h', type=click.IntRange(min=1), help='Lookback window in hours')
@click.pass_obj
def infractions(cfg, email, hours):
    """List open infringements, most recent first"""
    rows = _aggregator(cfg).get_infractions(email, hours or cfg['dashboard']['default_hours'])
    click.echo(json.dumps([row.to_dict() for row in rows], indent=2))


@cli.command()
@click.argument('car_id')
@click.pass_obj
def approve(cfg, car_id):
    """Approve the infringement recorded for CAR_ID"""
    try:
        matched = _aggregator(cfg).approve_infraction(car_id)
    except Exception as e:
        raise click.ClickException(str(e))
    if not matched:
        raise click.ClickException(f"No car detection found for {car_id}")
    click.echo(f"Approved {car_id}")


@cli.command()
@click.option('--email', '-e', required=True, help='Client email identifying the location')
@click.option('--hours', '-h', type=click.IntRange(min=1), help='Lookback window in hours')
@click.option('--output', '-o', type=click.Path(), help='Output file (.json, .csv or text)')
@click.pass_obj
def report(cfg, email, hours, output):
    """Generate a dashboard report"""
    reporter = DashboardReporter(_aggregator(cfg))
    report_data = reporter.generate_report(email, hours or cfg['dashboard']['default_hours'])

    if output:
        reporter.save_report(report_data, output)
        click.echo(f"Report saved to {output}")
    else:
        click.echo(reporter.format_report(report_data))


def _seed_demo(store: SQLiteDashboardStore) -> None:
    """Insert a demo client, one camera with four spots and a few detections"""
    hashed = bcrypt.hashpw(DEMO_PASSWORD.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')
    store.add_client(DEMO_EMAIL, hashed, name='Demo Client')
    location_id = store.add_location(DEMO_EMAIL)
    spots = json.dumps([{'name': f'A{i}', 'polygon': []} for i in range(1, 5)])
    camera_id = store.add_camera(location_id, spots)

    now = int(time.time())
    samples = [
        ('A1', 'ABC123', 1800, 1500, False, None, 600),
        ('A2', 'XYZ789', 5400, 5100, True, 'overstay', 3600),
        ('A3', 'LMN456', 900, 840, True, 'no_permit', 7200),
    ]
    for zone, plate, duration, time_in_zone, infraction, kind, age in samples:
        store.add_car_detection(camera_id, CarDetectionRecord(
            car_id=uuid.uuid4().hex[:12],
            license_plate=plate,
            zone=zone,
            duration=duration,
            time_in_zone=time_in_zone,
            infraction_occurred=infraction,
            infraction_type=kind,
            approved=False,
            timestamp_first_detected=now - age
        ))
    for i in range(5):
        store.add_person_detection(camera_id, PersonDetectionRecord(f'person-{i}', now - 300 * i))
    logger.info(f"Seeded demo data for camera {camera_id}")


if __name__ == '__main__':
    cli()
