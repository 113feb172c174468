# parkdash/reporting.py
from datetime import datetime
from typing import Dict, Any
import json
import pandas as pd

from .stats.aggregator import StatsAggregator

INFRACTION_COLUMNS = [
    'car_id', 'license_plate', 'dur_in_minutes', 'parking_spot',
    'minutes_parked', 'infraction_type', 'detection_time',
]


class DashboardReporter:
    """Generates snapshot reports of a location's dashboard"""

    def __init__(self, aggregator: StatsAggregator):
        self.aggregator = aggregator

    def generate_report(self, email: str, hours: int) -> Dict[str, Any]:
        """Collect stats and open infractions for one location"""
        stats = self.aggregator.compute_stats(email, hours)
        infractions = self.aggregator.get_infractions(email, hours)
        return {
            'generated_at': datetime.now().isoformat(),
            'client_email': email,
            'window_hours': hours,
            'stats': stats.to_dict(),
            'infractions': [row.to_dict() for row in infractions],
        }

    def save_report(self, report: Dict[str, Any], output_path: str) -> None:
        """Save report to file"""
        if output_path.endswith('.csv'):
            df = pd.DataFrame(report['infractions'], columns=INFRACTION_COLUMNS)
            df.to_csv(output_path, index=False)
            return

        with open(output_path, 'w') as f:
            if output_path.endswith('.json'):
                json.dump(report, f, indent=2)
            else:
                f.write(self.format_report(report))

    def format_report(self, report: Dict[str, Any]) -> str:
        """Format report as readable text"""
        stats = report['stats']
        utilization = stats['parkingUtilization']
        lines = [
            "Parking Dashboard Report",
            f"Generated: {report['generated_at']}",
            f"Location: {report['client_email']} (last {report['window_hours']} hours)",
            "\nParking Utilization:",
            f"  Spots used: {utilization['used']} of {stats['totalSpots']}",
            f"  Available: {utilization['available']}",
            f"  Utilization: {utilization['percentage']}%",
            f"\nAverage Stay Time (cars): {stats['averageStayTime']['cars']:.2f} minutes",
            f"Foot Traffic: {stats['footTraffic']}",
            f"Infringements: {stats['infringements']['count']} "
            f"({stats['infringements']['rate']}%)",
        ]

        if report['infractions']:
            lines.append("\nOpen Infringements:")
        for row in report['infractions']:
            lines.append(
                f"  {row['detection_time']}  {row['license_plate'] or 'unknown'}: "
                f"{row['infraction_type'] or 'unspecified'} in spot {row['parking_spot']}, "
                f"{row['minutes_parked']:.2f} minutes"
            )

        return "\n".join(lines)
