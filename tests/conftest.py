import copy

import pytest

VALID_PROPERTIES = {
    "nama_lokasi": "Pangkalan Stasiun Sudirman",
    "jenis_lokasi": "Stasiun",
    "jam_ramainya": "06:00 - 10:00 & 16:00 - 20:00",
    "tingkat_kepadatan": 4,
    "tingkat_keamanan": 3,
    "akses_internet": 5,
    "kenyamanan": 3,
    "fasilitas": "Tempat duduk, warung",
    "alamat": "Jl. Jend. Sudirman, Jakarta Pusat",
}


def make_feature(coordinates=(106.8230, -6.2020), **properties):
    props = copy.deepcopy(VALID_PROPERTIES)
    props.update(properties)
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": list(coordinates)},
        "properties": props,
    }


def make_document(*features):
    return {"type": "FeatureCollection", "features": list(features or [make_feature()])}


@pytest.fixture
def feature():
    return make_feature()


@pytest.fixture
def document():
    return make_document(
        make_feature(nama_lokasi="A"),
        make_feature(coordinates=(106.80, -6.25), nama_lokasi="B"),
    )
