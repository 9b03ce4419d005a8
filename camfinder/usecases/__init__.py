"""Async use cases behind the navigation controller.

Use cases call ports, keep blocking work off the event loop and report
failures as :class:`camfinder.domain.ports.UseCaseError`.
"""
