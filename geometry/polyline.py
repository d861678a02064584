"""
Polyline decoding for OSRM `geometries=polyline` responses.

Decode-only. Each point is a (lat, lon) delta pair; each delta is a run of
5-bit chunks offset by 63, with 0x20 as the continuation bit and the sign
folded into the lowest bit.
"""

from __future__ import annotations

from typing import List, Tuple

from .distance import LatLon

# OSRM's `polyline` format; `polyline6` would be 6.
DEFAULT_PRECISION = 5


def _read_delta(encoded: str, index: int) -> Tuple[int, int]:
    """Read one signed delta starting at `index`. Returns (delta, next_index)."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ValueError("truncated polyline string")
        byte = ord(encoded[index]) - 63
        index += 1
        result |= (byte & 0x1F) << shift
        shift += 5
        if not byte & 0x20:
            break

    delta = ~(result >> 1) if result & 1 else result >> 1
    return delta, index


def decode_polyline(encoded: str, precision: int = DEFAULT_PRECISION) -> List[LatLon]:
    """
    Decode an encoded polyline into a list of (lat, lon) tuples.

    Raises:
        ValueError: if the string ends in the middle of a coordinate.
    """
    factor = 10 ** precision
    coordinates: List[LatLon] = []
    index = 0
    lat = 0
    lon = 0

    while index < len(encoded):
        d_lat, index = _read_delta(encoded, index)
        d_lon, index = _read_delta(encoded, index)
        lat += d_lat
        lon += d_lon
        coordinates.append((lat / factor, lon / factor))

    return coordinates
