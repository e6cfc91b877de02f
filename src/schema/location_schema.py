# Property keys used in uploaded GeoJSON files
NAME = "nama_lokasi"
CATEGORY = "jenis_lokasi"
BUSY_HOURS = "jam_ramainya"
FACILITIES = "fasilitas"
ADDRESS = "alamat"
DENSITY_LEVEL = "tingkat_kepadatan"
SECURITY_LEVEL = "tingkat_keamanan"
INTERNET_ACCESS = "akses_internet"
COMFORT_LEVEL = "kenyamanan"

# Order matters: diagnostics are reported in this order
TEXT_FIELDS = [NAME, CATEGORY, BUSY_HOURS, FACILITIES, ADDRESS]
RATING_FIELDS = [DENSITY_LEVEL, SECURITY_LEVEL, INTERNET_ACCESS, COMFORT_LEVEL]

ALLOWED_LOCATION_TYPES = [
    "Terminal",
    "Minimarket",
    "Perumahan",
    "Mall",
    "Stasiun",
    "Pinggir jalan",
    "Universitas",
    "Mesjid",
    "SPBU",
    "Sekolah",
    "Bank",
    "Warkop",
    "Cafe",
]

RATING_MIN = 1
RATING_MAX = 5
NAME_MAX_LENGTH = 100
ADDRESS_MAX_LENGTH = 200
MAX_FEATURES = 1000

# Rough bounding box of Indonesia (lng_min, lng_max, lat_min, lat_max)
INDONESIA_BOUNDS = (95, 141, -11, 6)

# "06:00 - 10:00" or "06:00 - 10:00 & 16:00 - 20:00"
BUSY_HOURS_PATTERN = (
    r"([0-9]{2}:[0-9]{2}\s*-\s*[0-9]{2}:[0-9]{2})"
    r"(\s*&\s*[0-9]{2}:[0-9]{2}\s*-\s*[0-9]{2}:[0-9]{2})*"
)

# JSON schema for records exchanged with the external REST backend
BACKEND_LOCATION_SCHEMA = {
    "type": "object",
    "properties": {
        "nama_tempat": {"type": "string", "minLength": 1},
        "alamat": {"type": "string"},
        "deskripsi": {"type": "string"},
        "latitude": {"type": ["number", "string"]},
        "longitude": {"type": ["number", "string"]},
        "kategori": {"type": "string"},
        "fasilitas": {"type": "string"},
        "jam_ramainya": {"type": "string"},
        "rating": {"type": ["number", "string"]},
    },
    "required": ["nama_tempat", "alamat", "latitude", "longitude"],
}

# Envelope returned by the backend's GET endpoint
BACKEND_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "data": {"type": "array", "items": BACKEND_LOCATION_SCHEMA},
    },
    "required": ["data"],
}
