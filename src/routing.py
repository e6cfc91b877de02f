# Standard library imports
import logging

# Third-party imports
import openrouteservice
import requests
from openrouteservice.directions import directions
from openrouteservice.exceptions import ApiError, HTTPError, Timeout

# Local application imports
from locations import haversine_km

logger = logging.getLogger(__name__)


# Function to create an OpenRouteService client, None when no key is configured
def create_client(api_key):
    if not api_key:
        logger.warning("ORS_API_KEY is not set, route distances fall back to direct distance")
        return None
    return openrouteservice.Client(key=api_key)


# Function to ask OpenRouteService for the driving distance between two (lat, lng) points
def route_distance_km(client, origin, destination):
    route = directions(
        client,
        coordinates=[
            [origin[1], origin[0]],  # OpenRouteService expects [longitude, latitude]
            [destination[1], destination[0]],
        ],
        profile="driving-car",
        instructions=False,
    )
    meters = route["routes"][0]["summary"]["distance"]
    return round(meters / 1000, 2)


def distance_to(record, user_location, client=None):
    """Distance from the user to a record, by road when possible.

    Falls back to the straight-line distance when no client is configured or
    the routing service fails.
    """
    if client is not None:
        try:
            return {
                "distance_km": route_distance_km(client, user_location, record.latlng),
                "mode": "route",
            }
        except (
            ApiError,
            HTTPError,
            Timeout,
            requests.exceptions.RequestException,
            KeyError,
            IndexError,
        ) as e:
            logger.error(f"Error getting route for {record.attributes.name}: {e}")

    direct = haversine_km(user_location[0], user_location[1], *record.latlng)
    return {"distance_km": round(direct, 2), "mode": "direct"}
