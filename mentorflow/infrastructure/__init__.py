"""Infrastructure Layer — database, store adapter, external clients, logging.

Invariants:
    - All external calls wrapped with retry/timeout/error mapping
    - Driver exceptions never escape; they become PersistenceError / AnthropicAPIError

Design Decisions:
    - Resilient wrappers over raw clients (single responsibility)
"""
