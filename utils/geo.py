"""Geo helpers for tiling a search area with circles."""

import math

EARTH_RADIUS_M = 6371000
# Centre-to-centre spacing of hexagonally packed circles, as a multiple of the radius (~sqrt(3)).
HEX_SPACING = 1.732


def calc_surrounding_coords(latitude: float, longitude: float, radius: float) -> list[dict]:
    """
    Centres of the six circles of `radius` metres that surround (latitude, longitude)
    in a hexagonal packing, at bearings 0, 60, ..., 300 degrees.

    Returns a list of {"latitude": ..., "longitude": ...} in bearing order.
    """
    angular = HEX_SPACING * radius / EARTH_RADIUS_M
    lat1 = math.radians(latitude)
    coords = []
    for i in range(6):
        bearing = math.radians(i * 60)
        lat2 = math.asin(
            math.sin(lat1) * math.cos(angular)
            + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
        )
        lon_delta = math.atan2(
            math.sin(bearing) * math.sin(angular) * math.cos(lat1),
            math.cos(angular) - math.sin(lat1) * math.sin(lat2),
        )
        coords.append({"latitude": math.degrees(lat2), "longitude": longitude + math.degrees(lon_delta)})
    return coords


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = phi2 - phi1
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))
