# Standard library imports
from dataclasses import dataclass

# Third-party imports
import geojson

# Local application imports
from geojson_validator import sanitize_document, validate_document
from schema import location_schema as keys


class InvalidDocumentError(ValueError):
    """Raised by parse_document when the data fails validation."""

    def __init__(self, result):
        self.result = result
        summary = "; ".join(result.errors[:3])
        if len(result.errors) > 3:
            summary += f" (+{len(result.errors) - 3} more)"
        super().__init__(f"Invalid GeoJSON document: {summary}")


@dataclass(frozen=True)
class PointGeometry:
    longitude: float
    latitude: float

    def to_geojson(self):
        return geojson.Point((self.longitude, self.latitude))


@dataclass(frozen=True)
class LocationAttributes:
    name: str
    category: str
    busy_hours: str
    facilities: str
    address: str
    density_level: int
    security_level: int
    internet_access: int
    comfort_level: int

    @classmethod
    def from_properties(cls, properties):
        return cls(
            name=properties[keys.NAME],
            category=properties[keys.CATEGORY],
            busy_hours=properties[keys.BUSY_HOURS],
            facilities=properties[keys.FACILITIES],
            address=properties[keys.ADDRESS],
            density_level=int(properties[keys.DENSITY_LEVEL]),
            security_level=int(properties[keys.SECURITY_LEVEL]),
            internet_access=int(properties[keys.INTERNET_ACCESS]),
            comfort_level=int(properties[keys.COMFORT_LEVEL]),
        )

    def to_properties(self):
        return {
            keys.NAME: self.name,
            keys.CATEGORY: self.category,
            keys.BUSY_HOURS: self.busy_hours,
            keys.DENSITY_LEVEL: self.density_level,
            keys.SECURITY_LEVEL: self.security_level,
            keys.INTERNET_ACCESS: self.internet_access,
            keys.COMFORT_LEVEL: self.comfort_level,
            keys.FACILITIES: self.facilities,
            keys.ADDRESS: self.address,
        }


@dataclass(frozen=True)
class LocationRecord:
    geometry: PointGeometry
    attributes: LocationAttributes

    @property
    def latlng(self):
        # Map libraries expect (lat, lng), GeoJSON stores [lng, lat]
        return (self.geometry.latitude, self.geometry.longitude)

    def to_geojson(self):
        return geojson.Feature(
            geometry=self.geometry.to_geojson(),
            properties=self.attributes.to_properties(),
        )


@dataclass(frozen=True)
class LocationDocument:
    records: tuple

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def to_geojson(self):
        return geojson.FeatureCollection([record.to_geojson() for record in self.records])


def parse_document(data):
    """Validate, sanitize and convert parsed GeoJSON into a LocationDocument.

    Returns the document together with the ValidationResult so callers can
    still show warnings for accepted files.
    """
    result = validate_document(data)
    if not result.is_valid:
        raise InvalidDocumentError(result)

    clean = sanitize_document(data)
    records = []
    for feature in clean["features"]:
        lng, lat = feature["geometry"]["coordinates"]
        records.append(
            LocationRecord(
                geometry=PointGeometry(longitude=float(lng), latitude=float(lat)),
                attributes=LocationAttributes.from_properties(feature["properties"]),
            )
        )
    return LocationDocument(records=tuple(records)), result
