"""Services Layer — the assignment engine's imperative shell.

Invariants:
    - Handlers split by entity side (max 4 methods each)
    - Handlers read through DocumentCollection, decide with core/, then write

Design Decisions:
    - RelationshipEngine wires handlers with an explicit method table (no auto-discovery)
"""
