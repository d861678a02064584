#Purpose: The OSRM "adapter/client" for map matching.
#Sole responsibility: talk to OSRM /match via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lon,lat)
#URL construction (/match/v1/{profile}/...)
#timeouts (exactly one attempt, no retries)
#parsing response JSON (polyline or geojson geometry) into (lat, lon) paths
#It should not contain simplification rules or fallback policy.


from dotenv import load_dotenv
import json
import os
import time
from typing import Any, Dict, List, Optional, Sequence
import requests

from geometry.distance import LatLon
from geometry.polyline import decode_polyline

# Read OSRM base URL from environment
# Example in .env:
# OSRM_BASE_URL=http://localhost:5000
load_dotenv()
DEFAULT_BASE_URL = "https://router.project-osrm.org"

USER_AGENT = "RoadSnap/1.0"

CHUNK_SIZE = 8192


class OSRMError(Exception):
    """OSRM answered, but with something we cannot use."""
    pass


class OSRMNoMatchError(OSRMError):
    """OSRM reported a non-"Ok" code or returned no matchings."""
    pass


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to OSRM via HTTP
    - Convert internal (lat, lon) -> OSRM (lon,lat) and back
    - Return normalized outputs

    Transport failures are not wrapped: callers see requests.Timeout /
    requests.RequestException as raised by requests.
    """
    def __init__(self,
                 base_url: Optional[str] = None,
                 profile: str = "driving",
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or os.getenv("OSRM_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
        self.profile = profile #the mode of transportation (driving, walking, cycling)
        self.session = session or requests.Session()

    #----------------
    # Internal helpers for coordinate formatting and response parsing
    #----------------
    def format_coordinates(self, coords: Sequence[LatLon]) -> str:
        """Convert list of (lat, lon) to OSRM format 'lon,lat;lon,lat;...'"""
        return ';'.join([f"{lon},{lat}" for lat, lon in coords])

    def format_radiuses(self, radiuses: Sequence[float]) -> str:
        """One search radius (meters) per coordinate, ';'-joined."""
        return ';'.join(str(radius) for radius in radiuses)

    def parse_geometry(self, geometry: Any) -> List[LatLon]:
        """
        Normalize a matching geometry to a list of (lat, lon).

        - polyline: encoded string, decoded at precision 5
        - geojson: {"coordinates": [[lon, lat], ...]}
        """
        if isinstance(geometry, str):
            try:
                return decode_polyline(geometry)
            except ValueError as e:
                raise OSRMError(f"OSRM returned an undecodable polyline: {e}") from e

        if isinstance(geometry, dict) and isinstance(geometry.get("coordinates"), list):
            path: List[LatLon] = []
            for point in geometry["coordinates"]:
                if not isinstance(point, (list, tuple)) or len(point) < 2:
                    raise OSRMError(f"OSRM returned a malformed geojson point: {point!r}")
                try:
                    path.append((float(point[1]), float(point[0])))
                except (TypeError, ValueError) as e:
                    raise OSRMError(f"OSRM returned a non-numeric geojson point: {point!r}") from e
            return path

        raise OSRMError("OSRM matching has no usable geometry")

    #----------------
    # match service (map matching)
    #----------------
    def match(self,
              coordinates: Sequence[LatLon],
              radiuses: Sequence[float],
              *,
              overview: str = "full",
              geometries: str = "polyline",
              timeout: float = 30.0,
              ) -> List[LatLon]:
        """
        calls the OSRM /match endpoint once and returns the geometry of the
        first matching as (lat, lon) points.

        Raises:
            OSRMNoMatchError: code != "Ok", or no matchings / empty geometry
            OSRMError: body is not usable
            requests.Timeout: connect, any single read, or the whole body
                download exceeded `timeout` seconds
            requests.RequestException: network failure or non-2xx status

        requests only bounds the connect and each socket read, so the body is
        streamed and checked against one overall deadline as well.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to match a path.")
        if len(radiuses) != len(coordinates):
            raise ValueError("Exactly one radius per coordinate is required.")

        url = f"{self.base_url}/match/v1/{self.profile}/{self.format_coordinates(coordinates)}"
        params = {
            "overview": overview,
            "geometries": geometries,
            "radiuses": self.format_radiuses(radiuses),
            "gaps": "ignore",
        }

        deadline = time.monotonic() + timeout

        # the response is closed on every exit path
        with self.session.get(
            url,
            params=params,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            stream=True,
        ) as response:
            response.raise_for_status()
            body = bytearray()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                body.extend(chunk)
                if time.monotonic() > deadline:
                    raise requests.Timeout(f"OSRM response not complete after {timeout}s")

        try:
            data = json.loads(bytes(body))
        except ValueError as e:
            raise OSRMError(f"OSRM response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise OSRMError("OSRM response is not a JSON object")

        #validating OSRM response
        if data.get("code") != "Ok":
            raise OSRMNoMatchError(f"OSRM error: {data.get('code')} {data.get('message', '')}".strip())

        matchings = data.get("matchings")
        if not isinstance(matchings, list) or not matchings:
            raise OSRMNoMatchError("OSRM returned no matchings")

        matching: Dict[str, Any] = matchings[0] #only the first matching is used
        if not isinstance(matching, dict):
            raise OSRMError("OSRM matching is not a JSON object")
        path = self.parse_geometry(matching.get("geometry"))
        if not path:
            raise OSRMNoMatchError("OSRM matching geometry is empty")
        return path
