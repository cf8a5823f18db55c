"""
Application package initializer.

The project is organised in layers.  ``core`` holds configuration,
logging, errors and the record store; ``repositories`` wrap the store
with typed queries; ``services`` implement the review workflow rules;
``api`` exposes the services over HTTP.  The FastAPI application is
built by ``main.create_app`` and is not imported here, so the rule
engine can be used without pulling in the web layer.
"""
