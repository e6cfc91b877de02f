# Standard library imports
import json
import math
import os
import re
import sys
import webbrowser

# Add the src directory to the Python path
sys.path.append(os.path.join(os.path.dirname(__file__), "src"))

# Third-party imports
import geojson
from flask import Flask, Response, jsonify, request, send_from_directory
from flask_cors import CORS

# Local imports
import config
from backend import BackendError, InvalidLocationError, fetch_locations, submit_location
from geojson_validator import generate_sample
from locations import filter_records, nearest, search
from maps import render_map_html
from models import InvalidDocumentError, LocationDocument, parse_document
from routing import create_client, distance_to

time_re = re.compile(r"[0-9]{2}:[0-9]{2}")


class LocationStore:
    """Dataset currently shown on the map, replaced by each accepted upload."""

    def __init__(self, document):
        self.document = document

    def replace(self, document):
        self.document = document


def load_default_document(path, logger):
    if path and os.path.exists(path):
        try:
            with open(path, encoding="utf-8") as f:
                data = geojson.load(f)
            document, result = parse_document(data)
            for warning in result.warnings:
                logger.warning(f"{path}: {warning}")
            logger.info(f"Loaded {len(document)} locations from {path}")
            return document
        except (ValueError, OSError) as e:
            logger.error(f"Could not load default dataset {path}: {e}")

    logger.info("Using the sample dataset")
    document, _ = parse_document(json.loads(generate_sample()))
    return document


# Query parameter helpers raise ValueError, reported as 400
def float_arg(name, required=False):
    value = request.args.get(name)
    if value is None or value == "":
        if required:
            raise ValueError(f"Missing query parameter '{name}'")
        return None
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"Query parameter '{name}' must be a number")
    if not math.isfinite(number):
        raise ValueError(f"Query parameter '{name}' must be a finite number")
    return number


def int_arg(name):
    value = request.args.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Query parameter '{name}' must be an integer")


def user_location_args(required=False):
    lat = float_arg("lat", required)
    lng = float_arg("lng", required)
    if lat is None or lng is None:
        return None
    if not -90 <= lat <= 90:
        raise ValueError("Query parameter 'lat' must be between -90 and 90")
    if not -180 <= lng <= 180:
        raise ValueError("Query parameter 'lng' must be between -180 and 180")
    return (lat, lng)


def read_upload():
    """Return the uploaded file (or raw request body) as text."""
    upload = request.files.get("file")
    raw = upload.read() if upload else request.get_data()
    if len(raw) > config.MAX_UPLOAD_BYTES:
        raise ValueError("File is too large")
    return raw.decode("utf-8-sig")


def create_app(settings=None):
    app = Flask(__name__)
    app.config.update(
        MAPS=config.MAPS,
        DEFAULT_DATASET=config.DEFAULT_DATASET,
        ORS_API_KEY=config.ORS_API_KEY,
        BACKEND_URL=config.BACKEND_URL,
        MAX_CONTENT_LENGTH=config.MAX_UPLOAD_BYTES,
    )
    if settings:
        app.config.update(settings)
    CORS(app)

    store = LocationStore(load_default_document(app.config["DEFAULT_DATASET"], app.logger))
    app.extensions["location_store"] = store
    app.extensions["ors_client"] = create_client(app.config["ORS_API_KEY"])

    @app.errorhandler(ValueError)
    def bad_request(e):
        return jsonify({"error": "Bad request", "details": str(e)}), 400

    @app.route("/")
    def index():
        return "Peta Pangkalan Ojek Online"

    @app.route("/maps/<path:filename>")
    def maps(filename):
        # Serve any file from the "maps" directory
        return send_from_directory(os.path.abspath(app.config["MAPS"]), filename)

    @app.route("/map")
    def map_page():
        document = store.document
        selected_index = int_arg("selected")
        selected = None
        if selected_index is not None and 0 <= selected_index < len(document):
            selected = document.records[selected_index]
        html = render_map_html(document, user_location_args(), selected)
        return Response(html, mimetype="text/html")

    @app.route("/api/locations", methods=["GET"])
    def list_locations():
        busy_at = request.args.get("busy_at")
        if busy_at and not time_re.fullmatch(busy_at):
            raise ValueError("Query parameter 'busy_at' must look like HH:MM")

        records = search(store.document, request.args.get("q"))
        records = filter_records(
            records,
            category=request.args.get("category"),
            min_density=int_arg("min_density"),
            max_density=int_arg("max_density"),
            busy_at=busy_at,
        )
        return jsonify(LocationDocument(records=tuple(records)).to_geojson())

    @app.route("/api/locations/upload", methods=["POST"])
    def upload_locations():
        try:
            data = json.loads(read_upload())
        except UnicodeDecodeError as e:
            app.logger.error(f"Upload is not UTF-8 text: {e}")
            return jsonify({"error": "File is not valid text", "details": str(e)}), 400
        except json.JSONDecodeError as e:
            app.logger.error(f"Upload is not valid JSON: {e}")
            return jsonify({"error": "File is not valid JSON", "details": str(e)}), 400

        try:
            document, result = parse_document(data)
        except InvalidDocumentError as e:
            app.logger.warning(f"Rejected upload with {len(e.result.errors)} errors")
            return jsonify(e.result.to_dict()), 422

        store.replace(document)
        app.logger.info(f"Loaded {len(document)} locations from upload")
        return jsonify({**result.to_dict(), "count": len(document)})

    @app.route("/api/locations/sample", methods=["GET"])
    def download_sample():
        return Response(
            generate_sample(),
            mimetype="application/geo+json",
            headers={"Content-Disposition": "attachment; filename=sample.geojson"},
        )

    @app.route("/api/locations/nearest", methods=["GET"])
    def nearest_location():
        lat, lng = user_location_args(required=True)
        found = nearest(store.document, lat, lng)
        if found is None:
            return jsonify({"error": "No locations loaded"}), 404
        record, distance_km = found
        return jsonify(
            {"feature": record.to_geojson(), "distance_km": round(distance_km, 2)}
        )

    @app.route("/api/route", methods=["GET"])
    def route_distance():
        user_location = user_location_args(required=True)
        index = int_arg("index")
        document = store.document
        if index is None or not 0 <= index < len(document):
            return jsonify({"error": "Unknown location index"}), 404
        record = document.records[index]
        return jsonify(distance_to(record, user_location, app.extensions["ors_client"]))

    @app.route("/api/backend/locations", methods=["GET", "POST"])
    def backend_locations():
        url = app.config["BACKEND_URL"]
        try:
            if request.method == "POST":
                record = submit_location(request.get_json(silent=True), url=url)
                return jsonify(record), 201
            return jsonify({"data": fetch_locations(url=url)})
        except InvalidLocationError as e:
            return jsonify({"error": "Invalid location", "details": str(e)}), 400
        except BackendError as e:
            app.logger.error(f"Error calling location backend: {e}")
            return jsonify({"error": "Backend unavailable", "details": str(e)}), 502

    return app


if __name__ == "__main__":
    config.configure_logging()
    app = create_app()
    webbrowser.open("http://localhost:3000/map")
    app.run(debug=True, host="localhost", port=3000)
