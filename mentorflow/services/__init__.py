"""Services Layer — lifecycle managers, tool registry and tool handlers.

Invariants:
    - Managers receive their store explicitly (no module-level clients)
    - Tool registry uses explicit registration (no auto-discovery)

Design Decisions:
    - One handler file per tool family for locality
"""
