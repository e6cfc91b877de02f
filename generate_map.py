# Standard library imports
import json
import os
import sys

# Add the src directory to the Python path
sys.path.append(os.path.join(os.path.dirname(__file__), "src"))

# Third-party imports
import geojson

# Local application imports
from config import DEFAULT_DATASET, MAPS, configure_logging
from maps import create_map, save_map
from models import InvalidDocumentError, parse_document

configure_logging()

# Load location data, the dataset must pass validation before it is rendered
if not os.path.exists(DEFAULT_DATASET):
    raise FileNotFoundError(f"The file '{DEFAULT_DATASET}' was not found.")
with open(DEFAULT_DATASET, encoding="utf-8") as f:
    data = geojson.load(f)

try:
    document, result = parse_document(data)
except InvalidDocumentError as e:
    print(json.dumps(e.result.to_dict(), indent=2, ensure_ascii=False))
    sys.exit(1)

for warning in result.warnings:
    print(f"Warning: {warning}")

# Create maps directory if it doesn't exist
if not os.path.exists(MAPS):
    os.makedirs(MAPS)

m = create_map(document)
save_map(m, f"{MAPS}/pangkalan_ojek_map.html")
print(f"Map with {len(document)} locations saved as 'pangkalan_ojek_map.html'.")
