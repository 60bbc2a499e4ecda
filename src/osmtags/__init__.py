"""osmtags - query engine for the OpenStreetMap iD tagging schema."""

__version__ = "1.0.0"
