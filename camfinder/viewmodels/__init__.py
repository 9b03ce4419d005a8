"""ViewModel package for UI state and command surfaces.

Call context:
    ``camfinder/web_ui`` and ``camfinder/app`` import concrete viewmodels from
    this package to bind view callbacks to state transitions.

Dependencies:
    Modules in this package depend on domain types and lightweight formatting
    helpers only (settings read adapter default endpoint constants). I/O and
    use-case orchestration remain outside.

Responsibilities:
    - Expose mutable form state and field error flags.
    - Transform screen states into view-facing DTOs.
    - Hold runtime settings with coercion and validation.
"""
