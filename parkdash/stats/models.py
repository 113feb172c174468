# parkdash/stats/models.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional

SECONDS_PER_HOUR = 3600


@dataclass
class DetectionWindow:
    """Camera plus lookback duration for windowed detection queries"""
    camera_id: int
    hours: int

    def lower_bound(self, now: float) -> float:
        """Epoch seconds; rows first detected after this are in the window"""
        return now - self.hours * SECONDS_PER_HOUR


@dataclass
class CameraInfo:
    camera_id: int
    spots_tracked: Optional[str] = None


@dataclass
class CarDetectionRecord:
    car_id: str
    license_plate: Optional[str]
    zone: Optional[str]
    duration: float  # seconds
    time_in_zone: float  # seconds
    infraction_occurred: bool
    infraction_type: Optional[str]
    approved: bool
    timestamp_first_detected: float


@dataclass
class PersonDetectionRecord:
    person_id: str
    timestamp_first_detected: float


@dataclass
class ParkingUtilization:
    used: int = 0
    available: int = 0
    percentage: int = 0


@dataclass
class AverageStayTime:
    cars: float = 0
    people: float = 0


@dataclass
class Infringements:
    count: int = 0
    rate: int = 0


@dataclass
class DashboardStats:
    """Flat metrics record returned to dashboard callers"""
    parking_utilization: ParkingUtilization = field(default_factory=ParkingUtilization)
    average_stay_time: AverageStayTime = field(default_factory=AverageStayTime)
    foot_traffic: int = 0
    infringements: Infringements = field(default_factory=Infringements)
    total_spots: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parkingUtilization': {
                'used': self.parking_utilization.used,
                'available': self.parking_utilization.available,
                'percentage': self.parking_utilization.percentage,
            },
            'averageStayTime': {
                'cars': self.average_stay_time.cars,
                'people': self.average_stay_time.people,
            },
            'footTraffic': self.foot_traffic,
            'infringements': {
                'count': self.infringements.count,
                'rate': self.infringements.rate,
            },
            'totalSpots': self.total_spots,
        }


@dataclass
class InfractionRow:
    """One open infringement as listed on the dashboard"""
    car_id: str
    license_plate: Optional[str]
    dur_in_minutes: float
    parking_spot: Optional[str]
    minutes_parked: float
    infraction_type: Optional[str]
    detection_time: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            'car_id': self.car_id,
            'license_plate': self.license_plate,
            'dur_in_minutes': self.dur_in_minutes,
            'parking_spot': self.parking_spot,
            'minutes_parked': self.minutes_parked,
            'infraction_type': self.infraction_type,
            'detection_time': self.detection_time.isoformat(),
        }
