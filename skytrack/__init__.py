"""SkyTrack: single-flight tracking backend and terminal dashboard."""

__version__ = "0.1.0"
