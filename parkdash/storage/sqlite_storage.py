# parkdash/storage/sqlite_storage.py
import sqlite3
import logging
from typing import Dict, Any, List, Optional

from .base import DashboardStore
from ..stats.models import CameraInfo, CarDetectionRecord, PersonDetectionRecord

logger = logging.getLogger(__name__)

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS clients (
        client_id INTEGER PRIMARY KEY AUTOINCREMENT,
        client_email TEXT NOT NULL UNIQUE,
        client_name TEXT,
        password TEXT
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS locations (
        location_id INTEGER PRIMARY KEY AUTOINCREMENT,
        client_email TEXT NOT NULL
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS camera (
        camera_id INTEGER PRIMARY KEY AUTOINCREMENT,
        location_id INTEGER NOT NULL,
        spots_tracked TEXT
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS car_detections (
        car_id TEXT PRIMARY KEY,
        camera_id INTEGER NOT NULL,
        license_plate TEXT,
        zone_ TEXT,
        duration REAL DEFAULT 0,
        time_in_zone REAL DEFAULT 0,
        infraction_occurred INTEGER DEFAULT 0,
        infraction_type TEXT,
        approved INTEGER DEFAULT 0,
        timestamp_first_detected INTEGER NOT NULL
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS ppl_detections (
        person_id TEXT NOT NULL,
        camera_id INTEGER NOT NULL,
        timestamp_first_detected INTEGER NOT NULL
    )
    ''',
]


class SQLiteDashboardStore(DashboardStore):
    def __init__(self, db_path: str = 'parkdash.db'):
        self.db_path = db_path
        logger.info(f"Initializing SQLite dashboard store at {db_path}")

    def initialize(self) -> None:
        """Create the dashboard tables if they do not exist"""
        try:
            with sqlite3.connect(self.db_path) as conn:
                for statement in SCHEMA:
                    conn.execute(statement)
                conn.commit()
                logger.debug("Database initialized successfully")
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize database: {str(e)}")
            raise

    def _fetch_one(self, query: str, params: tuple) -> Optional[tuple]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                return conn.execute(query, params).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Query failed: {str(e)}")
            raise

    def get_location_id(self, email: str) -> Optional[int]:
        row = self._fetch_one(
            'SELECT location_id FROM locations WHERE client_email = ? LIMIT 1',
            (email,)
        )
        return row[0] if row else None

    def get_camera(self, location_id: int) -> Optional[CameraInfo]:
        row = self._fetch_one(
            'SELECT camera_id, spots_tracked FROM camera WHERE location_id = ? LIMIT 1',
            (location_id,)
        )
        if row is None:
            return None
        logger.debug(f"Camera ID found: {row[0]}")
        return CameraInfo(camera_id=row[0], spots_tracked=row[1])

    def count_foot_traffic(self, camera_id: int, since: float) -> int:
        row = self._fetch_one('''
            SELECT COUNT(DISTINCT person_id)
            FROM ppl_detections
            WHERE camera_id = ?
            AND timestamp_first_detected > ?
        ''', (camera_id, since))
        return row[0] or 0

    def average_car_duration(self, camera_id: int, since: float) -> Optional[float]:
        row = self._fetch_one('''
            SELECT AVG(duration)
            FROM car_detections
            WHERE camera_id = ?
            AND timestamp_first_detected > ?
        ''', (camera_id, since))
        return row[0]

    def count_spots_used(self, camera_id: int, since: float) -> int:
        row = self._fetch_one('''
            SELECT COUNT(DISTINCT zone_)
            FROM car_detections
            WHERE camera_id = ?
            AND timestamp_first_detected > ?
        ''', (camera_id, since))
        return row[0] or 0

    def count_open_infractions(self, camera_id: int, since: float) -> int:
        row = self._fetch_one('''
            SELECT COUNT(*)
            FROM car_detections
            WHERE camera_id = ?
            AND timestamp_first_detected > ?
            AND infraction_occurred = 1
            AND approved = 0
        ''', (camera_id, since))
        return row[0] or 0

    def get_open_infractions(self, camera_id: int, since: float,
                             limit: int) -> List[CarDetectionRecord]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute('''
                    SELECT car_id, license_plate, zone_, duration, time_in_zone,
                           infraction_occurred, infraction_type, approved,
                           timestamp_first_detected
                    FROM car_detections
                    WHERE camera_id = ?
                      AND timestamp_first_detected > ?
                      AND infraction_occurred = 1
                      AND approved = 0
                    ORDER BY timestamp_first_detected DESC
                    LIMIT ?
                ''', (camera_id, since, limit))
                return [
                    CarDetectionRecord(
                        car_id=row[0],
                        license_plate=row[1],
                        zone=row[2],
                        duration=row[3] or 0,
                        time_in_zone=row[4] or 0,
                        infraction_occurred=bool(row[5]),
                        infraction_type=row[6],
                        approved=bool(row[7]),
                        timestamp_first_detected=row[8]
                    )
                    for row in cursor.fetchall()
                ]
        except sqlite3.Error as e:
            logger.error(f"Failed to fetch infractions: {str(e)}")
            raise

    def approve_car(self, car_id: str) -> int:
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute(
                    'UPDATE car_detections SET approved = 1 WHERE car_id = ?',
                    (car_id,)
                )
                conn.commit()
                logger.debug(f"Approved car {car_id}: {cursor.rowcount} row(s)")
                return cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to approve car {car_id}: {str(e)}")
            raise

    def get_client(self, email: str) -> Optional[Dict[str, Any]]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.row_factory = sqlite3.Row
                row = conn.execute(
                    'SELECT * FROM clients WHERE client_email = ? LIMIT 1',
                    (email,)
                ).fetchone()
                return dict(row) if row else None
        except sqlite3.Error as e:
            logger.error(f"Failed to fetch client {email}: {str(e)}")
            raise

    # Seeding helpers used by `parkdash init-db --demo` and the tests

    def _insert(self, query: str, params: tuple) -> int:
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute(query, params)
                conn.commit()
                return cursor.lastrowid
        except sqlite3.Error as e:
            logger.error(f"Failed to insert row: {str(e)}")
            raise

    def add_client(self, email: str, password: str, name: Optional[str] = None) -> int:
        return self._insert(
            'INSERT INTO clients (client_email, client_name, password) VALUES (?, ?, ?)',
            (email, name, password)
        )

    def add_location(self, email: str) -> int:
        return self._insert(
            'INSERT INTO locations (client_email) VALUES (?)',
            (email,)
        )

    def add_camera(self, location_id: int, spots_tracked: Optional[str] = None) -> int:
        return self._insert(
            'INSERT INTO camera (location_id, spots_tracked) VALUES (?, ?)',
            (location_id, spots_tracked)
        )

    def add_car_detection(self, camera_id: int, record: CarDetectionRecord) -> None:
        self._insert('''
            INSERT INTO car_detections
            (car_id, camera_id, license_plate, zone_, duration, time_in_zone,
             infraction_occurred, infraction_type, approved, timestamp_first_detected)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ''', (
            record.car_id,
            camera_id,
            record.license_plate,
            record.zone,
            record.duration,
            record.time_in_zone,
            int(record.infraction_occurred),
            record.infraction_type,
            int(record.approved),
            record.timestamp_first_detected
        ))

    def add_person_detection(self, camera_id: int, record: PersonDetectionRecord) -> None:
        self._insert(
            'INSERT INTO ppl_detections (person_id, camera_id, timestamp_first_detected) '
            'VALUES (?, ?, ?)',
            (record.person_id, camera_id, record.timestamp_first_detected)
        )
