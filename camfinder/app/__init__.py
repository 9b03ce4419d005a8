"""Application composition layer for the webcam browser.

Controllers in this package own the screen state machine and wire view
models, adapters, and use cases into runnable workflows without placing
business logic in views.
"""
