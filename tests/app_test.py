import io
import json
from unittest.mock import patch

import pytest

from app import LocationStore, create_app
from backend import BackendError
from conftest import make_document, make_feature
from models import LocationDocument, parse_document


@pytest.fixture
def dataset(tmp_path):
    path = tmp_path / "locations.geojson"
    data = make_document(
        make_feature(
            coordinates=(106.8227, -6.1935),
            nama_lokasi="Pangkalan Tanah Abang",
            jenis_lokasi="Stasiun",
            tingkat_kepadatan=5,
        ),
        make_feature(
            coordinates=(106.8317, -6.2253),
            nama_lokasi="Pangkalan Ambassador",
            jenis_lokasi="Mall",
            tingkat_kepadatan=3,
            jam_ramainya="11:00 - 13:00",
        ),
    )
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def client(dataset):
    app = create_app(
        {"TESTING": True, "DEFAULT_DATASET": str(dataset), "ORS_API_KEY": None}
    )
    return app.test_client()


def names(response):
    return [f["properties"]["nama_lokasi"] for f in response.get_json()["features"]]


def test_sample_dataset_when_default_missing(tmp_path):
    app = create_app({"TESTING": True, "DEFAULT_DATASET": str(tmp_path / "missing.geojson")})
    response = app.test_client().get("/api/locations")
    assert names(response) == ["Contoh Terminal Bus", "Contoh Minimarket"]


def test_list_locations(client):
    response = client.get("/api/locations")
    assert response.status_code == 200
    assert response.get_json()["type"] == "FeatureCollection"
    assert names(response) == ["Pangkalan Tanah Abang", "Pangkalan Ambassador"]


def test_list_locations_with_filters(client):
    assert names(client.get("/api/locations?q=ambassador")) == ["Pangkalan Ambassador"]
    assert names(client.get("/api/locations?category=Stasiun")) == ["Pangkalan Tanah Abang"]
    assert names(client.get("/api/locations?min_density=4")) == ["Pangkalan Tanah Abang"]
    assert names(client.get("/api/locations?busy_at=12:00")) == ["Pangkalan Ambassador"]


@pytest.mark.parametrize("query", ["min_density=banyak", "busy_at=siang"])
def test_list_locations_bad_query(client, query):
    response = client.get(f"/api/locations?{query}")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Bad request"


def test_upload_valid_file_replaces_dataset(client):
    data = make_document(make_feature(nama_lokasi="  Pangkalan Baru  ", kenyamanan=3.0))
    response = client.post(
        "/api/locations/upload",
        data={"file": (io.BytesIO(json.dumps(data).encode("utf-8")), "baru.geojson")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["isValid"] is True
    assert body["count"] == 1
    assert names(client.get("/api/locations")) == ["Pangkalan Baru"]


def test_upload_json_body(client):
    data = make_document(make_feature(nama_lokasi="A"), make_feature(nama_lokasi="A"))
    response = client.post("/api/locations/upload", json=data)
    assert response.status_code == 200
    assert len(response.get_json()["warnings"]) == 1


def test_upload_invalid_document_keeps_dataset(client):
    data = make_document(make_feature(jenis_lokasi="Restoran"))
    response = client.post("/api/locations/upload", json=data)
    assert response.status_code == 422
    body = response.get_json()
    assert body["isValid"] is False
    assert "Restoran" in body["errors"][0]
    assert names(client.get("/api/locations")) == [
        "Pangkalan Tanah Abang",
        "Pangkalan Ambassador",
    ]


def test_upload_unparseable_text(client):
    response = client.post(
        "/api/locations/upload", data="{not json", content_type="application/json"
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "File is not valid JSON"


def test_upload_huge_integer_rating_is_rejected(client):
    text = json.dumps(make_document(make_feature(kenyamanan=0))).replace(
        '"kenyamanan": 0', '"kenyamanan": 1' + "0" * 400
    )
    response = client.post(
        "/api/locations/upload", data=text, content_type="application/json"
    )
    assert response.status_code == 422
    assert response.get_json()["errors"] == [
        "Feature 1: kenyamanan must be between 1 and 5"
    ]


def test_download_sample(client):
    response = client.get("/api/locations/sample")
    assert response.status_code == 200
    assert "sample.geojson" in response.headers["Content-Disposition"]
    assert len(json.loads(response.get_data(as_text=True))["features"]) == 2


def test_nearest(client):
    response = client.get("/api/locations/nearest?lat=-6.2250&lng=106.8300")
    body = response.get_json()
    assert body["feature"]["properties"]["nama_lokasi"] == "Pangkalan Ambassador"
    assert body["distance_km"] < 1


def test_nearest_requires_coordinates(client):
    response = client.get("/api/locations/nearest?lat=-6.2")
    assert response.status_code == 400


@pytest.mark.parametrize(
    "query",
    [
        "lat=nan&lng=nan",
        "lat=inf&lng=106.8",
        "lat=-6.2&lng=-infinity",
        "lat=95&lng=106.8",
        "lat=-6.2&lng=181",
    ],
)
def test_nearest_rejects_unusable_coordinates(client, query):
    response = client.get(f"/api/locations/nearest?{query}")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Bad request"


def test_map_rejects_non_finite_user_location(client):
    response = client.get("/map?lat=nan&lng=106.8")
    assert response.status_code == 400


def test_location_store_replace():
    store = LocationStore(LocationDocument(records=()))
    document, _ = parse_document(make_document(make_feature(nama_lokasi="Baru")))
    store.replace(document)
    assert store.document is document
    assert store.document.records[0].attributes.name == "Baru"


def test_route_falls_back_to_direct_distance(client):
    response = client.get("/api/route?lat=-6.1935&lng=106.8227&index=0")
    assert response.get_json() == {"distance_km": 0.0, "mode": "direct"}


def test_route_unknown_index(client):
    response = client.get("/api/route?lat=-6.2&lng=106.8&index=9")
    assert response.status_code == 404


def test_map_page(client):
    response = client.get("/map?lat=-6.2&lng=106.82&selected=1")
    assert response.status_code == 200
    assert response.mimetype == "text/html"
    assert "Pangkalan Ambassador" in response.get_data(as_text=True)


def test_backend_proxy_get(client):
    with patch("app.fetch_locations", return_value=[{"nama_tempat": "X"}]):
        response = client.get("/api/backend/locations")
    assert response.get_json() == {"data": [{"nama_tempat": "X"}]}


def test_backend_proxy_post_invalid(client):
    response = client.post("/api/backend/locations", json={"nama_tempat": "X"})
    assert response.status_code == 400


def test_backend_proxy_unavailable(client):
    with patch("app.fetch_locations", side_effect=BackendError("down")):
        response = client.get("/api/backend/locations")
    assert response.status_code == 502
