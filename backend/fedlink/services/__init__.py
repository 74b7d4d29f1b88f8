"""Services Layer — orchestration that composes repositories with core logic.

Invariants:
    - Services may call repositories and core; never the API layer
"""
