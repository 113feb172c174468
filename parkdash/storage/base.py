from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional

from ..stats.models import CameraInfo, CarDetectionRecord


class DashboardStore(ABC):
    """Abstract base class for the detection data the dashboard reads"""

    @abstractmethod
    def get_location_id(self, email: str) -> Optional[int]:
        """Resolve a client email to its monitored location"""
        pass

    @abstractmethod
    def get_camera(self, location_id: int) -> Optional[CameraInfo]:
        """Resolve a location to its camera and spots-tracked descriptor"""
        pass

    @abstractmethod
    def count_foot_traffic(self, camera_id: int, since: float) -> int:
        """Distinct people first detected after ``since``"""
        pass

    @abstractmethod
    def average_car_duration(self, camera_id: int, since: float) -> Optional[float]:
        """Mean parked duration in seconds, None when there are no rows"""
        pass

    @abstractmethod
    def count_spots_used(self, camera_id: int, since: float) -> int:
        """Distinct zones occupied by cars first detected after ``since``"""
        pass

    @abstractmethod
    def count_open_infractions(self, camera_id: int, since: float) -> int:
        """Infractions that have not been approved"""
        pass

    @abstractmethod
    def get_open_infractions(self, camera_id: int, since: float,
                             limit: int) -> List[CarDetectionRecord]:
        """Unapproved infractions, most recent first"""
        pass

    @abstractmethod
    def approve_car(self, car_id: str) -> int:
        """Mark a car detection approved, returning the number of rows matched"""
        pass

    @abstractmethod
    def get_client(self, email: str) -> Optional[Dict[str, Any]]:
        """Client account row used by the login boundary"""
        pass
