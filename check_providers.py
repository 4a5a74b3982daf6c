#!/usr/bin/env python3
"""Script to verify geocoder and OSRM trip connectivity."""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from stop_planner.config import settings
from stop_planner.errors import StopPlannerError
from stop_planner.services.geocoding.nominatim_client import NominatimClient
from stop_planner.services.routing.osrm_client import OSRMClient, check_health


def main():
    print("=" * 60)
    print("Provider Connection Test")
    print("=" * 60)
    print()

    print("1. Checking configuration...")
    print(f"   [OK] Geocoder URL: {settings.nominatim_base_url}")
    print(f"   [OK] OSRM Base URL: {settings.osrm_base_url}")
    print(f"   [OK] OSRM Profile: {settings.osrm_profile}")
    print()

    print("2. Testing geocoder...")
    try:
        coordinate = NominatimClient().resolve("Brandenburger Tor, Berlin")
        print(f"   [OK] Resolved to {coordinate[0]:.5f}, {coordinate[1]:.5f}")
    except StopPlannerError as e:
        print(f"   [ERROR] {e.code}: {e}")
        return 1
    print()

    print("3. Testing OSRM health check...")
    if not check_health():
        print("   [ERROR] OSRM service is not responding")
        return 1
    print("   [OK] OSRM service is healthy and accessible!")
    print()

    print("4. Testing OSRM trip request...")
    try:
        test_coords = [
            (52.517037, 13.388860),  # Berlin, Germany
            (52.496891, 13.385983),  # Berlin, Germany
            (52.529407, 13.397634),  # Berlin, Germany
        ]
        trip = OSRMClient().trip(test_coords, source_fixed=True)
        print(f"   [OK] Waypoint order: {list(trip.permutation)}")
        print(f"   [OK] Geometry points: {len(trip.geometry)}")
    except StopPlannerError as e:
        print(f"   [ERROR] {e.code}: {e}")
        return 1
    print()

    print("=" * 60)
    print("[SUCCESS] Geocoder and OSRM are reachable!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
