from unittest.mock import MagicMock, patch

import pytest
from openrouteservice.exceptions import ApiError

from conftest import make_document, make_feature
from models import parse_document
from routing import create_client, distance_to, route_distance_km


@pytest.fixture
def record():
    document, _ = parse_document(make_document(make_feature(coordinates=(106.8317, -6.2253))))
    return document.records[0]


def test_create_client_without_key():
    assert create_client(None) is None
    assert create_client("") is None


def test_route_distance_km_converts_meters():
    client = MagicMock()
    route = {"routes": [{"summary": {"distance": 4321.5, "duration": 600}}]}
    with patch("routing.directions", return_value=route) as mock_directions:
        assert route_distance_km(client, (-6.20, 106.80), (-6.25, 106.83)) == 4.32

    _, kwargs = mock_directions.call_args
    # OpenRouteService expects [longitude, latitude]
    assert kwargs["coordinates"] == [[106.80, -6.20], [106.83, -6.25]]
    assert kwargs["profile"] == "driving-car"


def test_distance_to_uses_route(record):
    with patch("routing.route_distance_km", return_value=3.5):
        result = distance_to(record, (-6.20, 106.80), client=MagicMock())
    assert result == {"distance_km": 3.5, "mode": "route"}


def test_distance_to_falls_back_on_api_error(record):
    with patch("routing.route_distance_km", side_effect=ApiError(403, "Forbidden")):
        result = distance_to(record, (-6.2253, 106.8317), client=MagicMock())
    assert result == {"distance_km": 0.0, "mode": "direct"}


def test_distance_to_without_client(record):
    result = distance_to(record, (-6.20, 106.80))
    assert result["mode"] == "direct"
    assert 4 < result["distance_km"] < 5
