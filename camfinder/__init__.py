"""Webcam browser: find webcams near a coordinate and inspect their links."""

__version__ = "0.1.0"
