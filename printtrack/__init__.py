"""PrintTrack - 3D printer, print job and maintenance tracking."""

__version__ = "0.1.0"
