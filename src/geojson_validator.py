# Standard library imports
import copy
import math
import re
from collections import Counter
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field

# Third-party imports
import geojson

# Local application imports
from schema.location_schema import (
    ADDRESS,
    ADDRESS_MAX_LENGTH,
    ALLOWED_LOCATION_TYPES,
    BUSY_HOURS,
    BUSY_HOURS_PATTERN,
    CATEGORY,
    INDONESIA_BOUNDS,
    MAX_FEATURES,
    NAME,
    NAME_MAX_LENGTH,
    RATING_FIELDS,
    RATING_MAX,
    RATING_MIN,
    TEXT_FIELDS,
)

busy_hours_re = re.compile(BUSY_HOURS_PATTERN)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list = field(default_factory=list)
    warnings: list = field(default_factory=list)

    def to_dict(self):
        return {
            "isValid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


# Real numbers only: bool is an int subclass but is not a rating or coordinate
def is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# Python ints are unbounded, math.isfinite would overflow on huge JSON integers
def is_finite_number(value):
    if not is_number(value):
        return False
    return isinstance(value, int) or math.isfinite(value)


def is_nan(value):
    return isinstance(value, float) and math.isnan(value)


# None, False, 0, "" and NaN count as blank; an empty object or array does not
def is_blank(value):
    if value is None or is_nan(value):
        return True
    return not isinstance(value, (Mapping, list, tuple)) and not value


def validate_document(data):
    """Validate a parsed GeoJSON FeatureCollection of ojek base locations.

    Document level problems stop validation immediately. Otherwise every
    feature is checked and all errors are collected in feature order.
    Warnings (large files, duplicate names) never affect validity.
    """
    errors = []
    warnings = []

    # Check if data exists
    if data is None:
        errors.append("File is empty or unreadable")
        return ValidationResult(False, errors, warnings)

    # Check basic GeoJSON structure
    if not isinstance(data, Mapping):
        errors.append("File must be a valid JSON object")
        return ValidationResult(False, errors, warnings)

    if data.get("type") != "FeatureCollection":
        errors.append("GeoJSON type must be 'FeatureCollection'")
        return ValidationResult(False, errors, warnings)

    features = data.get("features")
    if not isinstance(features, list):
        errors.append("Property 'features' must be an array")
        return ValidationResult(False, errors, warnings)

    if len(features) == 0:
        errors.append("GeoJSON file must contain at least one feature")
        return ValidationResult(False, errors, warnings)

    if len(features) > MAX_FEATURES:
        warnings.append(
            f"File contains {len(features)} locations. "
            "Performance may be affected for very large data."
        )

    for index, feature in enumerate(features):
        errors.extend(validate_feature(feature, index))

    duplicates = find_duplicate_names(features)
    if duplicates:
        listed = ", ".join(duplicates[:3])
        more = "..." if len(duplicates) > 3 else ""
        warnings.append(
            f"Found {len(duplicates)} location names used more than once: {listed}{more}"
        )

    return ValidationResult(len(errors) == 0, errors, warnings)


def validate_feature(feature, index):
    errors = []
    label = f"Feature {index + 1}"

    if not isinstance(feature, Mapping) or feature.get("type") != "Feature":
        errors.append(f"{label}: type must be 'Feature'")
        return errors

    errors.extend(validate_geometry(feature.get("geometry"), label))
    errors.extend(validate_attributes(feature.get("properties"), label))
    return errors


def validate_geometry(geometry, label):
    errors = []

    if is_blank(geometry):
        errors.append(f"{label}: geometry must not be empty")
        return errors

    if not isinstance(geometry, Mapping) or geometry.get("type") != "Point":
        errors.append(f"{label}: geometry type must be 'Point'")
        return errors

    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, (list, tuple)):
        errors.append(f"{label}: coordinates must be an array")
        return errors

    if len(coordinates) != 2:
        errors.append(
            f"{label}: coordinates must contain 2 elements [longitude, latitude]"
        )
        return errors

    lng, lat = coordinates

    if not is_finite_number(lng):
        errors.append(f"{label}: longitude must be a number")
    elif lng < -180 or lng > 180:
        errors.append(f"{label}: longitude must be between -180 and 180")

    if not is_finite_number(lat):
        errors.append(f"{label}: latitude must be a number")
    elif lat < -90 or lat > 90:
        errors.append(f"{label}: latitude must be between -90 and 90")

    # Out of region points are rejected, not just flagged
    if is_finite_number(lng) and is_finite_number(lat):
        lng_min, lng_max, lat_min, lat_max = INDONESIA_BOUNDS
        if lng < lng_min or lng > lng_max or lat < lat_min or lat > lat_max:
            errors.append(f"{label}: coordinates are outside Indonesia")

    return errors


def validate_attributes(properties, label):
    errors = []

    if not isinstance(properties, Mapping):
        errors.append(f"{label}: properties must be an object")
        return errors

    for key in TEXT_FIELDS:
        value = properties.get(key)
        if value is None or value == "":
            errors.append(f"{label}: {key} must not be empty")
        elif not isinstance(value, str):
            errors.append(f"{label}: {key} must be text")
        elif not value.strip():
            errors.append(f"{label}: {key} must not be empty")

    category = properties.get(CATEGORY)
    if isinstance(category, str) and category and category not in ALLOWED_LOCATION_TYPES:
        errors.append(
            f"{label}: {CATEGORY} '{category}' is not valid. "
            f"Allowed types: {', '.join(ALLOWED_LOCATION_TYPES)}"
        )

    for key in RATING_FIELDS:
        value = properties.get(key)
        if value is None:
            errors.append(f"{label}: {key} must not be empty")
        elif not is_number(value) or is_nan(value):
            errors.append(f"{label}: {key} must be a number")
        elif not is_finite_number(value) or (
            isinstance(value, float) and not value.is_integer()
        ):
            errors.append(f"{label}: {key} must be a whole number")
        elif value < RATING_MIN or value > RATING_MAX:
            errors.append(
                f"{label}: {key} must be between {RATING_MIN} and {RATING_MAX}"
            )

    name = properties.get(NAME)
    if isinstance(name, str) and len(name) > NAME_MAX_LENGTH:
        errors.append(
            f"{label}: {NAME} is too long (maximum {NAME_MAX_LENGTH} characters)"
        )

    address = properties.get(ADDRESS)
    if isinstance(address, str) and len(address) > ADDRESS_MAX_LENGTH:
        errors.append(
            f"{label}: {ADDRESS} is too long (maximum {ADDRESS_MAX_LENGTH} characters)"
        )

    busy_hours = properties.get(BUSY_HOURS)
    if isinstance(busy_hours, str) and busy_hours:
        if not busy_hours_re.fullmatch(busy_hours):
            errors.append(
                f'{label}: {BUSY_HOURS} has an invalid format. Example: "06:00 - 10:00" '
                'or "06:00 - 10:00 & 16:00 - 20:00"'
            )

    return errors


def find_duplicate_names(features):
    """Return names used by more than one feature, in the order they repeat."""
    seen = Counter()
    duplicates = []
    for feature in features:
        properties = feature.get("properties") if isinstance(feature, Mapping) else None
        name = properties.get(NAME) if isinstance(properties, Mapping) else None
        if not isinstance(name, str):
            continue
        seen[name] += 1
        if seen[name] == 2:
            duplicates.append(name)
    return duplicates


# Math.round semantics: halves round up, infinities saturate
def round_half_up(value):
    if isinstance(value, int) or not math.isfinite(value):
        return value
    return math.floor(value + 0.5)


def clamp_rating(value):
    rounded = round_half_up(value)
    if is_nan(rounded):
        return rounded
    clamped = max(RATING_MIN, min(RATING_MAX, rounded))
    return int(clamped)


def sanitize_document(data):
    """Return a normalised copy of a validated document.

    Text fields are trimmed, ratings are rounded and clamped to 1-5. Values
    of the wrong type are passed through untouched; only call this after
    validate_document reported the data as valid.
    """
    data = copy.deepcopy(data)
    if not isinstance(data, MutableMapping) or not isinstance(data.get("features"), list):
        return data

    for feature in data["features"]:
        if not isinstance(feature, MutableMapping):
            continue
        properties = feature.get("properties")
        if not isinstance(properties, MutableMapping):
            continue

        for key in TEXT_FIELDS:
            if isinstance(properties.get(key), str):
                properties[key] = properties[key].strip()

        for key in RATING_FIELDS:
            if is_number(properties.get(key)):
                properties[key] = clamp_rating(properties[key])

    return data


def generate_sample():
    """Return a two-location sample file that passes validate_document."""
    sample = geojson.FeatureCollection(
        [
            geojson.Feature(
                geometry=geojson.Point((106.8456, -6.2088)),
                properties={
                    "nama_lokasi": "Contoh Terminal Bus",
                    "jenis_lokasi": "Terminal",
                    "jam_ramainya": "06:00 - 10:00 & 16:00 - 20:00",
                    "tingkat_kepadatan": 5,
                    "tingkat_keamanan": 4,
                    "akses_internet": 3,
                    "kenyamanan": 4,
                    "fasilitas": "Tempat duduk, warung, toilet, mushola",
                    "alamat": "Jl. Contoh No.1, Jakarta Pusat",
                },
            ),
            geojson.Feature(
                geometry=geojson.Point((106.82, -6.25)),
                properties={
                    "nama_lokasi": "Contoh Minimarket",
                    "jenis_lokasi": "Minimarket",
                    "jam_ramainya": "07:00 - 09:00 & 17:00 - 19:00",
                    "tingkat_kepadatan": 3,
                    "tingkat_keamanan": 4,
                    "akses_internet": 4,
                    "kenyamanan": 3,
                    "fasilitas": "Tempat duduk, ATM",
                    "alamat": "Jl. Contoh No.2, Jakarta Selatan",
                },
            ),
        ]
    )
    return geojson.dumps(sample, indent=2, ensure_ascii=False)
