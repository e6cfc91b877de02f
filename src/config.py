# Standard library imports
import logging
import os

# Third-party imports
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Path for Data (remains outside /src)
DATA = "data"
LOCATIONS = f"{DATA}/locations"

# Path for Maps (remains outside /src)
MAPS = "maps"

# Dataset shown on the map until a file is uploaded
DEFAULT_DATASET = os.getenv("DEFAULT_DATASET", f"{LOCATIONS}/pangkalan_ojek.geojson")

# OpenRouteService key for route distances (optional, direct distance otherwise)
ORS_API_KEY = os.getenv("ORS_API_KEY")

# External REST backend storing submitted locations
BACKEND_URL = os.getenv(
    "BACKEND_URL", "https://be-palembang-2.vercel.app/api/tempat_wisata"
)
BACKEND_TIMEOUT = float(os.getenv("BACKEND_TIMEOUT", "10"))

# Upload limit for GeoJSON files (5 MB)
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level=None):
    """Configure the root logger once for scripts and the Flask app."""
    level_name = (level or LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT
    )
