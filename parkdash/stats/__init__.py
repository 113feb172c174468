"""
Dashboard statistics derived from raw camera detections.

``StatsAggregator`` resolves a client's location to its camera, then computes
foot traffic, average stay time, parking utilization and infringement counts
over a lookback window. Each metric group is computed independently and
falls back to zero when its data is missing or its query fails.
"""

from .models import (
    AverageStayTime,
    CameraInfo,
    CarDetectionRecord,
    DashboardStats,
    DetectionWindow,
    InfractionRow,
    Infringements,
    ParkingUtilization,
    PersonDetectionRecord,
)
from .spots import count_tracked_spots
from .aggregator import StatsAggregator, DEFAULT_HOURS, HISTORY_HOURS, INFRACTIONS_LIMIT

__all__ = [
    'AverageStayTime',
    'CameraInfo',
    'CarDetectionRecord',
    'DashboardStats',
    'DetectionWindow',
    'InfractionRow',
    'Infringements',
    'ParkingUtilization',
    'PersonDetectionRecord',
    'StatsAggregator',
    'count_tracked_spots',
    'DEFAULT_HOURS',
    'HISTORY_HOURS',
    'INFRACTIONS_LIMIT',
]
