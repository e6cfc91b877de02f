# Standard library imports
import re
from math import atan2, cos, radians, sin, sqrt

# Default map centre: Jakarta
DEFAULT_CENTER = (-6.2088, 106.8456)

EARTH_RADIUS_KM = 6371

# Marker colours per density level (1-5)
DENSITY_COLORS = {5: "red", 4: "orange", 3: "yellow", 2: "green", 1: "blue"}

# Marker colours per location type, restricted to the folium.Icon palette
CATEGORY_COLORS = {
    "terminal": "red",
    "minimarket": "blue",
    "perumahan": "green",
    "mall": "purple",
    "stasiun": "beige",
    "pinggir jalan": "orange",
    "universitas": "darkblue",
    "mesjid": "darkgreen",
    "spbu": "lightred",
    "sekolah": "cadetblue",
    "bank": "darkpurple",
    "warkop": "black",
    "cafe": "black",
}

# Font Awesome icon per location type
CATEGORY_ICONS = {
    "terminal": "bus",
    "minimarket": "shopping-basket",
    "perumahan": "home",
    "mall": "shopping-bag",
    "stasiun": "train",
    "pinggir jalan": "road",
    "universitas": "graduation-cap",
    "mesjid": "moon-o",
    "spbu": "tint",
    "sekolah": "book",
    "bank": "university",
    "warkop": "coffee",
    "cafe": "coffee",
}

time_range_re = re.compile(r"([0-9]{2}):([0-9]{2})\s*-\s*([0-9]{2}):([0-9]{2})")


# Function to calculate the great-circle distance between two points in km
def haversine_km(lat1, lon1, lat2, lon2):
    d_lat = radians(lat2 - lat1)
    d_lon = radians(lon2 - lon1)
    a = sin(d_lat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def density_color(level):
    return DENSITY_COLORS.get(level, "gray")


def category_color(category):
    return CATEGORY_COLORS.get((category or "").lower(), "gray")


def category_icon(category):
    return CATEGORY_ICONS.get((category or "").lower(), "circle")


def categories(records):
    """Unique location types in the order they first appear (map legend)."""
    return list(dict.fromkeys(record.attributes.category for record in records))


def map_center(records):
    records = list(records)
    if not records:
        return DEFAULT_CENTER
    lat = sum(record.geometry.latitude for record in records) / len(records)
    lng = sum(record.geometry.longitude for record in records) / len(records)
    return (lat, lng)


def to_minutes(text):
    hours, minutes = text.split(":")
    return int(hours) * 60 + int(minutes)


def busy_ranges(busy_hours):
    """Parse "06:00 - 10:00 & 16:00 - 20:00" into [(360, 600), (960, 1200)]."""
    ranges = []
    for match in time_range_re.finditer(busy_hours or ""):
        start_h, start_m, end_h, end_m = (int(part) for part in match.groups())
        ranges.append((start_h * 60 + start_m, end_h * 60 + end_m))
    return ranges


def is_busy_at(busy_hours, time_text):
    minute = to_minutes(time_text)
    for start, end in busy_ranges(busy_hours):
        if start <= end:
            if start <= minute <= end:
                return True
        # Range crossing midnight, e.g. "22:00 - 02:00"
        elif minute >= start or minute <= end:
            return True
    return False


def search(records, query):
    """Case-insensitive match on name or address. Empty query keeps everything."""
    query = (query or "").strip().lower()
    if not query:
        return list(records)
    return [
        record
        for record in records
        if query in record.attributes.name.lower()
        or query in record.attributes.address.lower()
    ]


def filter_records(
    records, category=None, min_density=None, max_density=None, busy_at=None
):
    result = []
    for record in records:
        attributes = record.attributes
        if category and attributes.category != category:
            continue
        if min_density is not None and attributes.density_level < min_density:
            continue
        if max_density is not None and attributes.density_level > max_density:
            continue
        if busy_at and not is_busy_at(attributes.busy_hours, busy_at):
            continue
        result.append(record)
    return result


def with_distances(records, lat, lng):
    """Pair each record with its direct distance to (lat, lng), closest first."""
    pairs = [
        (record, haversine_km(lat, lng, record.geometry.latitude, record.geometry.longitude))
        for record in records
    ]
    # sorted() is stable, equal distances keep display order
    return sorted(pairs, key=lambda pair: pair[1])


def nearest(records, lat, lng):
    pairs = with_distances(records, lat, lng)
    return pairs[0] if pairs else None
