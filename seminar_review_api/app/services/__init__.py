"""
Service layer: the review workflow rule engine.

Each service encapsulates the rules for one domain and receives its
repositories through the constructor.  ``container.ServiceContainer``
wires one instance of every service over a shared record store.
"""
