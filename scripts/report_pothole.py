"""
CLI helper to submit a pothole report or list known potholes.

Examples:
    python scripts/report_pothole.py address --city Budapest --street "Váci út 12"
    python scripts/report_pothole.py tap --lat 47.51 --lng 19.05 --description "Budapest, Váci út 12"
    python scripts/report_pothole.py list --markers
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, TextIO

# Add parent directory to Python path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from config.settings import settings
from src.potholes.errors import PotholeError
from src.potholes.ingestion.workflow import build_workflow
from src.potholes.models.defect import AddressSubmission, Coordinates, RoadPosition, TapSubmission
from src.potholes.services.severity import SeverityScale
from src.potholes.utils.logger import get_logger

logger = get_logger(__name__)

ROAD_POSITION_CHOICES = [p.value for p in RoadPosition]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report potholes and inspect the pothole list.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    address = subparsers.add_parser("address", help="Report a pothole by address.")
    address.add_argument("--city", default=settings.default_city, help="City name.")
    address.add_argument("--street", required=True, help="Street and house number.")
    address.add_argument("--postal-code", help="Optional postal code used for geocoding.")
    address.add_argument("--road-position", choices=ROAD_POSITION_CHOICES, default="center")

    tap = subparsers.add_parser("tap", help="Report a pothole at known coordinates.")
    tap.add_argument("--lat", type=float, required=True)
    tap.add_argument("--lng", type=float, required=True)
    tap.add_argument("--description", required=True, help="Location description.")
    tap.add_argument("--road-position", choices=ROAD_POSITION_CHOICES, default="center")

    listing = subparsers.add_parser("list", help="Print every known pothole.")
    listing.add_argument("--markers", action="store_true", help="Print severity markers instead of rows.")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, workflow=None, out: Optional[TextIO] = None) -> int:
    """
    Run one command.

    Results go to out (stdout by default); failures go to stderr.

    Returns:
        Process exit code: 0 on success, 1 on a reported failure
    """
    args = parse_args(argv)

    try:
        workflow = workflow or build_workflow(settings)

        if args.command == "list":
            reports = workflow.store.list_all()
            if args.markers:
                rows = [m.model_dump(mode="json") for m in SeverityScale().markers(reports)]
            else:
                rows = [r.model_dump(mode="json") for r in reports]
            print(json.dumps(rows, ensure_ascii=False, indent=2), file=out or sys.stdout)
            return 0

        if args.command == "address":
            submission = AddressSubmission(
                city=args.city,
                street=args.street,
                postal_code=args.postal_code,
                road_position=RoadPosition(args.road_position),
            )
        else:
            submission = TapSubmission(
                coordinates=Coordinates(latitude=args.lat, longitude=args.lng),
                description=args.description,
                road_position=RoadPosition(args.road_position),
            )

        result = workflow.submit(submission)
    except PotholeError as e:
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1

    print(result.message, file=out or sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
