"""Core Layer — domain types, errors, pure rules and the store contract.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions here are pure and deterministic; IO only appears as Protocols

Design Decisions:
    - Functional core separated from imperative shell
"""
