"""Parts catalog service: faceted product search and compatibility resolution."""

__version__ = "1.0.0"
