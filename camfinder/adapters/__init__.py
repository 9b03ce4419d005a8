"""Concrete implementations of the domain ports.

``windy_rest`` talks to the webcam catalog, ``location_ip`` and
``location_mock`` answer location queries, and ``url_opener`` hands links to
the system browser. Only ``camfinder.app.controller`` and the tests import
them directly.
"""
