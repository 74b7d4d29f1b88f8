"""Database Package — declarative Base, schema creation, session factory.

Invariants:
    - Base.metadata is the single source of truth for table structure
    - Schema creation is idempotent (CREATE TABLE IF NOT EXISTS semantics)
"""
