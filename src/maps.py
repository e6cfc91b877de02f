# Standard library imports
import re
from html import escape
from importlib import resources

# Third-party imports
import folium
from folium import MacroElement
from jinja2 import Template
from jsmin import jsmin
from csscompressor import compress

# Local application imports
from locations import category_color, category_icon, categories, haversine_km, map_center

# Base layers offered in the layer control, the first one is shown by default
TILE_LAYERS = [
    {
        "name": "OSM",
        "tiles": "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        "attr": '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors',
        "subdomains": "abc",
    },
    {
        "name": "Google Maps",
        "tiles": "https://{s}.google.com/vt/lyrs=m&x={x}&y={y}&z={z}",
        "attr": "&copy; Google Maps",
        "subdomains": ["mt0", "mt1", "mt2", "mt3"],
    },
    {
        "name": "Google Satellite",
        "tiles": "https://{s}.google.com/vt/lyrs=s,h&x={x}&y={y}&z={z}",
        "attr": "&copy; Google Maps",
        "subdomains": ["mt0", "mt1", "mt2", "mt3"],
    },
    {
        "name": "ESRI",
        "tiles": "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        "attr": "&copy; ESRI",
        "subdomains": "abc",
    },
]

# folium.Icon colour names are not all valid CSS colours
LEGEND_HEX = {
    "red": "#d63e2a",
    "blue": "#38aadd",
    "green": "#72b026",
    "purple": "#d252b9",
    "beige": "#ffcb92",
    "orange": "#f69730",
    "darkblue": "#0067a3",
    "darkgreen": "#728224",
    "lightred": "#ff8e7f",
    "cadetblue": "#436978",
    "darkpurple": "#5b396b",
    "black": "#303030",
    "gray": "#575757",
}

# Stylesheet shipped as package data of the "assets" package
MAP_CSS = resources.files("assets").joinpath("map_styles.css")


class MapLegend(MacroElement):
    """Legend box listing the location types shown on the map."""

    _template = Template(
        """
        {% macro html(this, kwargs) %}
        <div class="map-legend">
          <div class="legend-title">Legend</div>
          {% for name, color in this.entries %}
          <div><span class="legend-swatch" style="background:{{ color }}"></span>{{ name|e }}</div>
          {% endfor %}
        </div>
        {% endmacro %}
        """
    )

    def __init__(self, location_types):
        super().__init__()
        self._name = "MapLegend"
        self.entries = [
            (name, LEGEND_HEX.get(category_color(name), LEGEND_HEX["gray"]))
            for name in location_types
        ]


def stars(level):
    return "★" * level + "☆" * (5 - level)


# Function to build the popup card of a location
def popup_html(record, distance_km=None):
    attributes = record.attributes
    rows = [
        f"<b>{escape(attributes.name)}</b><br><i>{escape(attributes.category)}</i>",
    ]
    if distance_km is not None:
        rows.append(f"<b>Jarak dari lokasi Anda:</b> {distance_km:.2f} km")
    rows.extend(
        [
            f"<b>Jam Ramai:</b> {escape(attributes.busy_hours)}",
            f"<b>Kepadatan:</b> <span class='stars'>{stars(attributes.density_level)}</span>",
            f"<b>Keamanan:</b> <span class='stars'>{stars(attributes.security_level)}</span>",
            f"<b>Kenyamanan:</b> <span class='stars'>{stars(attributes.comfort_level)}</span>",
            f"<b>Internet:</b> <span class='stars'>{stars(attributes.internet_access)}</span>",
            f"<b>Fasilitas:</b> {escape(attributes.facilities)}",
            f"<b>Alamat:</b> {escape(attributes.address)}",
        ]
    )
    return f"<div class='location-popup'>{'<br>'.join(rows)}</div>"


# Function to create a map with layers
def create_map(document, user_location=None, selected=None):
    records = list(document)
    center = user_location or map_center(records)
    m = folium.Map(location=list(center), zoom_start=12, tiles=None, control_scale=True)

    for index, layer in enumerate(TILE_LAYERS):
        folium.TileLayer(
            tiles=layer["tiles"],
            attr=layer["attr"],
            name=layer["name"],
            subdomains=layer["subdomains"],
            show=index == 0,
        ).add_to(m)

    locations_layer = folium.FeatureGroup(name="Pangkalan Ojek", show=True)

    for record in records:
        distance_km = None
        if user_location:
            distance_km = haversine_km(user_location[0], user_location[1], *record.latlng)

        if record == selected:
            icon = folium.DivIcon(
                html="<div class='pulse-animation'></div>",
                class_name="selected-marker",
                icon_size=(32, 32),
                icon_anchor=(16, 32),
            )
        else:
            icon = folium.Icon(
                color=category_color(record.attributes.category),
                icon=category_icon(record.attributes.category),
                prefix="fa",
            )

        folium.Marker(
            location=list(record.latlng),
            popup=folium.Popup(popup_html(record, distance_km), max_width=300),
            icon=icon,
            tooltip=folium.Tooltip(escape(record.attributes.name), sticky=True),
        ).add_to(locations_layer)

    locations_layer.add_to(m)

    # Add the user's position with a 100 m accuracy circle
    if user_location:
        user_layer = folium.FeatureGroup(name="Lokasi Anda", show=True)
        folium.Marker(
            location=list(user_location),
            popup=folium.Popup(
                f"<b>Lokasi Anda</b><br>Lat: {user_location[0]:.6f}, Lng: {user_location[1]:.6f}",
                max_width=300,
            ),
            icon=folium.Icon(color="blue", icon="user", prefix="fa"),
        ).add_to(user_layer)
        folium.Circle(
            location=list(user_location),
            radius=100,
            color="blue",
            fill=True,
            fill_color="blue",
            fill_opacity=0.1,
        ).add_to(user_layer)
        user_layer.add_to(m)

    # Add layer control to toggle layers
    folium.LayerControl(collapsed=True).add_to(m)

    MapLegend(categories(records)).add_to(m)

    # Add custom CSS for the map
    map_css = compress(MAP_CSS.read_text(encoding="utf-8"))

    styles = MacroElement().add_to(m)
    styles._template = Template(
        f"""
        {{% macro header(this, kwargs) %}}
        <style>{map_css}</style>
        {{% endmacro %}}
        """
    )

    return m


def render_map_html(document, user_location=None, selected=None):
    return create_map(document, user_location, selected).get_root().render()


def minify_html(html_content):
    # Minify <script> tags
    def minify_script(match):
        script_content = match.group(1)
        minified_script = jsmin(script_content, quote_chars="'\"`")
        return f"<script>{minified_script}</script>"

    html_content = re.sub(
        r"<script>(.*?)</script>", minify_script, html_content, flags=re.DOTALL
    )

    # Minify <style> tags
    def minify_style(match):
        style_content = match.group(1)
        minified_style = compress(style_content)
        return f"<style>{minified_style}</style>"

    return re.sub(r"<style>(.*?)</style>", minify_style, html_content, flags=re.DOTALL)


def save_map(m, file_path, minify=True):
    m.save(file_path)
    if not minify:
        return
    with open(file_path, "r") as file:
        html_content = file.read()
    with open(file_path, "w") as file:
        file.write(minify_html(html_content))
