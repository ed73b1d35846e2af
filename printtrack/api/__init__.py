"""HTTP API for PrintTrack."""

from printtrack.api.v1 import create_app

__all__ = ["create_app"]
