"""GigsLK portal backend-for-frontend service."""

__version__ = "0.1.0"
