"""Infrastructure Layer — database engine, session store, logging.

Invariants:
    - Infrastructure imports only errors and pure helpers from core/
    - All SQLAlchemy exceptions mapped to FedLinkError subclasses before leaving this layer
"""
