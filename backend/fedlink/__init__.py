"""FedLink Application Package — federated professional network backend.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
