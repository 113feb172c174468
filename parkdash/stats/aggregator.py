# parkdash/stats/aggregator.py
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

from .models import (
    AverageStayTime,
    CameraInfo,
    CarDetectionRecord,
    DashboardStats,
    DetectionWindow,
    InfractionRow,
    Infringements,
    ParkingUtilization,
)
from .spots import DEFAULT_SPOT_MARKER, count_tracked_spots, percentage, round_half_up

if TYPE_CHECKING:
    from ..storage.base import DashboardStore

logger = logging.getLogger(__name__)

DEFAULT_HOURS = 24
HISTORY_HOURS = 100000
INFRACTIONS_LIMIT = 50


class StatsAggregator:
    """
    Derives dashboard metrics from windowed detection rows.

    Every call reads fresh data from the store. Resolution misses and query
    failures never propagate: they leave the affected metrics at zero.
    """

    def __init__(self,
                 store: "DashboardStore",
                 spot_marker: str = DEFAULT_SPOT_MARKER,
                 infractions_limit: int = INFRACTIONS_LIMIT,
                 clock: Callable[[], float] = time.time):
        self.store = store
        self.spot_marker = spot_marker
        self.infractions_limit = infractions_limit
        self.clock = clock

    def compute_stats(self, location_email: str,
                      window_hours: int = DEFAULT_HOURS) -> DashboardStats:
        """Compute the dashboard metrics for one location over the last ``window_hours``"""
        stats = DashboardStats()

        camera = self._resolve_camera(location_email)
        if camera is None:
            return stats
        window = DetectionWindow(camera.camera_id, window_hours)
        since = window.lower_bound(self.clock())

        stats.foot_traffic = self._foot_traffic(window, since)
        stats.average_stay_time = self._average_stay_time(window, since)
        stats.total_spots, stats.parking_utilization = self._parking_utilization(
            window, since, camera.spots_tracked
        )
        stats.infringements = self._infringements(
            window, since, stats.parking_utilization.used
        )

        logger.debug(f"Computed stats for {location_email} over {window_hours}h: {stats}")
        return stats

    def get_infractions(self, location_email: str,
                        window_hours: int = DEFAULT_HOURS) -> List[InfractionRow]:
        """Open infractions for the location, most recent first"""
        camera = self._resolve_camera(location_email)
        if camera is None:
            return []
        window = DetectionWindow(camera.camera_id, window_hours)

        try:
            records = self.store.get_open_infractions(
                window.camera_id,
                window.lower_bound(self.clock()),
                self.infractions_limit
            )
        except Exception as e:
            logger.error(f"Error fetching infraction data: {str(e)}")
            return []

        rows = []
        for record in records:
            try:
                rows.append(self._to_infraction_row(record))
            except (TypeError, ValueError, OverflowError, OSError) as e:
                logger.error(f"Skipping malformed detection {record.car_id}: {str(e)}")
        return rows

    @staticmethod
    def _to_infraction_row(record: CarDetectionRecord) -> InfractionRow:
        return InfractionRow(
            car_id=record.car_id,
            license_plate=record.license_plate,
            dur_in_minutes=round_half_up(record.duration / 60, 2),
            parking_spot=record.zone,
            minutes_parked=round_half_up(record.time_in_zone / 60, 2),
            infraction_type=record.infraction_type,
            detection_time=datetime.fromtimestamp(
                record.timestamp_first_detected, tz=timezone.utc
            )
        )

    def approve_infraction(self, car_id: str) -> bool:
        """Approve a car's infraction; approving twice leaves the same state"""
        if not car_id:
            raise ValueError("Car ID is required")
        matched = self.store.approve_car(car_id)
        if not matched:
            logger.warning(f"No car detection found for car ID {car_id}")
        return matched > 0

    def _resolve_camera(self, location_email: str) -> Optional[CameraInfo]:
        try:
            location_id = self.store.get_location_id(location_email)
            if location_id is None:
                logger.debug(f"No location registered for {location_email}")
                return None

            camera = self.store.get_camera(location_id)
            if camera is None:
                logger.debug(f"No camera registered for location {location_id}")
                return None
            return camera
        except Exception as e:
            logger.error(f"Error resolving camera for {location_email}: {str(e)}")
            return None

    def _foot_traffic(self, window: DetectionWindow, since: float) -> int:
        # People detection is optional per site; a missing table just means no data
        try:
            return self.store.count_foot_traffic(window.camera_id, since) or 0
        except Exception as e:
            logger.warning(f"Foot traffic source unavailable: {str(e)}")
            return 0

    def _average_stay_time(self, window: DetectionWindow, since: float) -> AverageStayTime:
        try:
            avg_duration = self.store.average_car_duration(window.camera_id, since)
        except Exception as e:
            logger.error(f"Error calculating average stay time: {str(e)}")
            return AverageStayTime()

        if not avg_duration:
            return AverageStayTime()
        return AverageStayTime(cars=round_half_up(avg_duration / 60, 2))

    def _parking_utilization(self, window: DetectionWindow, since: float,
                             spots_tracked: Optional[str]) -> Tuple[int, ParkingUtilization]:
        try:
            spots_used = self.store.count_spots_used(window.camera_id, since)
            total_spots = count_tracked_spots(spots_tracked, self.spot_marker)
        except Exception as e:
            logger.error(f"Error calculating parking utilization: {str(e)}")
            return 0, ParkingUtilization()

        if total_spots <= 0:
            return total_spots, ParkingUtilization()

        return total_spots, ParkingUtilization(
            used=spots_used,
            available=total_spots - spots_used,
            percentage=percentage(spots_used, total_spots)
        )

    def _infringements(self, window: DetectionWindow, since: float,
                       spots_used: int) -> Infringements:
        try:
            count = self.store.count_open_infractions(window.camera_id, since) or 0
        except Exception as e:
            logger.error(f"Error counting infringements: {str(e)}")
            return Infringements()

        # The rate's denominator reuses the utilization figure as a stand-in
        # for total detections
        return Infringements(count=count, rate=percentage(count, count + spots_used))
