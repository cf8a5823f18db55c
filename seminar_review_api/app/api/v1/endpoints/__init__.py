"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one domain (sessions,
registrations, evaluations, awards, reports, users).  The routers are
aggregated in ``router.py``.
"""
