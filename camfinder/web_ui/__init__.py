"""NiceGUI presentation layer for the webcam browser."""
