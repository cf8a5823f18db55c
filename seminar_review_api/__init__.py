"""
Top-level package for the Seminar Review API.

All functionality lives in submodules under ``app``: the rule engine
in ``app.services``, entity models in ``app.schemas`` and the HTTP
layer in ``app.api``.  Import them by their fully qualified names,
e.g. ``seminar_review_api.app.services.session_service``.
"""

__all__ = []
