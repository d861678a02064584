import itertools
import json
from types import SimpleNamespace

import pytest
import requests

import routing.osrm_client as osrm_client
from routing.osrm_client import OSRMClient
from simplification.policy import fast_policy, precision_policy
from snapping.models import (
    WARNING_NO_MATCH,
    WARNING_TIMEOUT,
    WARNING_UNAVAILABLE,
    SnapFailure,
    SnapOk,
    SnapState,
)
from snapping.service import snap_to_road
from snapping.state_machine import SnapStateException, SnapTrace, can_transition


class MockResponse:
    def __init__(self, payload=None, status_code=200, body=None, chunks=1):
        self.body = body if body is not None else json.dumps(payload).encode("utf-8")
        self.status_code = status_code
        self.chunks = chunks
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error", response=self)

    def iter_content(self, chunk_size=1):
        size = max(1, -(-len(self.body) // self.chunks))
        for start in range(0, len(self.body), size):
            yield self.body[start:start + size]

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False


class MockSession:
    """
    Stands in for requests.Session: records every GET and either returns
    a canned response or raises a canned transport error.
    """
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None, stream=False):
        self.calls.append(
            {"url": url, "params": params, "headers": headers, "timeout": timeout, "stream": stream}
        )
        if self.error is not None:
            raise self.error
        return self.response


def make_client(session):
    return OSRMClient(base_url="http://osrm.test/", session=session)


@pytest.fixture
def drawn_path():
    # short hand-drawn path in Berlin Mitte (< 1 km)
    return [
        (52.517037, 13.388860),
        (52.518000, 13.389500),
        (52.519500, 13.390200),
        (52.521000, 13.391800),
    ]


@pytest.fixture
def long_path():
    # ~15 km straight north
    return [(45.0, 7.0), (45.135, 7.0)]


def test_single_point_path_fails_without_request():
    session = MockSession(response=MockResponse({"code": "Ok"}))
    outcome = snap_to_road(make_client(session), [(52.5, 13.4)])

    assert isinstance(outcome, SnapFailure)
    assert not outcome.success
    assert outcome.reason == "path too short"
    assert outcome.states == (SnapState.IDLE, SnapState.VALIDATING, SnapState.FAILED)
    assert session.calls == []


def test_empty_path_fails_without_request():
    session = MockSession()
    outcome = snap_to_road(make_client(session), [])

    assert not outcome.success
    assert session.calls == []


def test_timeout_degrades_to_original_path(drawn_path):
    session = MockSession(error=requests.Timeout("read timed out"))
    outcome = snap_to_road(make_client(session), drawn_path)

    assert isinstance(outcome, SnapOk)
    assert outcome.success
    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_TIMEOUT
    assert outcome.degraded
    assert len(session.calls) == 1  # no retries


def test_connection_error_degrades(drawn_path):
    session = MockSession(error=requests.ConnectionError("connection refused"))
    outcome = snap_to_road(make_client(session), drawn_path)

    assert outcome.success
    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_UNAVAILABLE


def test_http_error_status_degrades(drawn_path):
    response = MockResponse({"code": "Ok", "matchings": []}, status_code=503)
    outcome = snap_to_road(make_client(MockSession(response=response)), drawn_path)

    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_UNAVAILABLE
    assert response.closed


def test_malformed_body_degrades(drawn_path):
    response = MockResponse(["not", "an", "object"])
    outcome = snap_to_road(make_client(MockSession(response=response)), drawn_path)

    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_UNAVAILABLE


def test_invalid_json_body_degrades(drawn_path):
    response = MockResponse(body=b"<html>502 Bad Gateway</html>")
    outcome = snap_to_road(make_client(MockSession(response=response)), drawn_path)

    assert outcome.success
    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_UNAVAILABLE
    assert response.closed


def test_truncated_polyline_degrades(drawn_path):
    payload = {"code": "Ok", "matchings": [{"geometry": "_p~iF"}]}
    outcome = snap_to_road(make_client(MockSession(response=MockResponse(payload))), drawn_path)

    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_UNAVAILABLE


@pytest.mark.parametrize(
    "coordinates",
    [
        [{"lon": 13.3, "lat": 52.5}],
        [[13.3]],
        [["east", "north"]],
        [None],
    ],
)
def test_malformed_geojson_points_degrade(coordinates, drawn_path):
    payload = {"code": "Ok", "matchings": [{"geometry": {"coordinates": coordinates}}]}
    outcome = snap_to_road(
        make_client(MockSession(response=MockResponse(payload))),
        drawn_path,
        policy=fast_policy(),
    )

    assert outcome.success
    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_UNAVAILABLE


def test_slow_body_hits_overall_deadline(monkeypatch, drawn_path):
    # every clock read moves 10s forward; the 5s deadline passes after the first chunk
    clock = itertools.count(0.0, 10.0)
    monkeypatch.setattr(osrm_client, "time", SimpleNamespace(monotonic=lambda: next(clock)))

    payload = {"code": "Ok", "matchings": [{"geometry": {"coordinates": [[13.3888, 52.517], [13.39, 52.518]]}}]}
    response = MockResponse(payload, chunks=4)
    session = MockSession(response=response)
    outcome = snap_to_road(make_client(session), drawn_path, policy=fast_policy())

    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_TIMEOUT
    assert session.calls[0]["stream"] is True
    assert response.closed


@pytest.mark.parametrize(
    "payload",
    [
        {"code": "NoMatch", "message": "Could not match the trace."},
        {"code": "Ok", "matchings": []},
        {"code": "Ok"},
        {"code": "Ok", "matchings": [{"geometry": ""}]},
    ],
)
def test_no_match_degrades(payload, drawn_path):
    outcome = snap_to_road(make_client(MockSession(response=MockResponse(payload))), drawn_path)

    assert outcome.success
    assert outcome.snapped_path == drawn_path
    assert outcome.warning == WARNING_NO_MATCH
    assert outcome.states[-3:] == (SnapState.REQUESTING, SnapState.DEGRADED, SnapState.DONE)


def test_polyline_match_is_decoded(drawn_path):
    payload = {"code": "Ok", "matchings": [{"geometry": "_p~iF~ps|U_ulLnnqC_mqNvxq`@"}]}
    outcome = snap_to_road(make_client(MockSession(response=MockResponse(payload))), drawn_path)

    assert outcome.success
    assert outcome.warning is None
    assert not outcome.degraded
    assert outcome.snapped_path[0] == (38.5, -120.2)
    assert len(outcome.snapped_path) == 3
    assert outcome.states == (
        SnapState.IDLE,
        SnapState.VALIDATING,
        SnapState.SIMPLIFYING,
        SnapState.REQUESTING,
        SnapState.MATCHED,
        SnapState.DONE,
    )


def test_geojson_match_is_swapped_back_to_lat_lon(drawn_path):
    payload = {
        "code": "Ok",
        "matchings": [
            {"geometry": {"type": "LineString", "coordinates": [[13.3888, 52.517], [13.3918, 52.521]]}},
            {"geometry": {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 1.0]]}},
        ],
    }
    outcome = snap_to_road(
        make_client(MockSession(response=MockResponse(payload))),
        drawn_path,
        policy=fast_policy(),
    )

    assert outcome.snapped_path == [(52.517, 13.3888), (52.521, 13.3918)]
    assert outcome.warning is None


def test_request_shape_for_short_path(drawn_path):
    session = MockSession(error=requests.Timeout())
    outcome = snap_to_road(make_client(session), drawn_path)

    call = session.calls[0]
    assert call["url"].startswith("http://osrm.test/match/v1/driving/13.38886,52.517037;")
    assert call["url"].endswith(";13.3918,52.521")
    assert call["params"] == {
        "overview": "simplified",
        "geometries": "polyline",
        "radiuses": ";".join(["50"] * outcome.request_points),
        "gaps": "ignore",
    }
    assert call["timeout"] == 30.0
    assert call["headers"]["User-Agent"]


def test_request_shape_for_long_path(long_path):
    session = MockSession(error=requests.Timeout())
    snap_to_road(make_client(session), long_path)

    call = session.calls[0]
    assert call["url"] == "http://osrm.test/match/v1/driving/7.0,45.0;7.0,45.135"
    assert call["params"]["radiuses"] == "75;75"
    assert call["params"]["overview"] == "full"


def test_request_shape_for_fast_policy(long_path):
    session = MockSession(error=requests.Timeout())
    snap_to_road(make_client(session), long_path, policy=fast_policy())

    call = session.calls[0]
    assert call["params"]["radiuses"] == "50;50"
    assert call["params"]["overview"] == "full"
    assert call["params"]["geometries"] == "geojson"
    assert call["timeout"] == 5.0


def test_long_drawing_is_simplified_before_request():
    drawn = [(52.5 + i * 0.00003, 13.4 + (i % 7) * 0.00002) for i in range(800)]
    session = MockSession(error=requests.Timeout())
    outcome = snap_to_road(make_client(session), drawn, policy=precision_policy())

    sent = session.calls[0]["url"].rsplit("/", 1)[1].split(";")
    assert len(sent) == outcome.request_points <= 50
    assert sent[0] == "13.4,52.5"
    assert outcome.snapped_path == drawn


def test_input_path_is_not_mutated(drawn_path):
    snapshot = list(drawn_path)
    snap_to_road(make_client(MockSession(error=requests.Timeout())), drawn_path)
    assert drawn_path == snapshot


def test_coordinate_alias_is_shared():
    import geometry.distance as distance
    import snapping.models as models

    assert osrm_client.LatLon is distance.LatLon
    assert models.LatLon is distance.LatLon


def test_state_machine_rejects_illegal_transitions():
    trace = SnapTrace()
    assert trace.current == SnapState.IDLE
    assert not can_transition(SnapState.IDLE, SnapState.REQUESTING)

    with pytest.raises(SnapStateException):
        trace.advance(SnapState.REQUESTING)

    trace.advance(SnapState.VALIDATING)
    trace.advance(SnapState.FAILED)
    assert trace.is_terminal

    with pytest.raises(SnapStateException):
        trace.advance(SnapState.SIMPLIFYING)
