"""Pydantic Schemas — typed payloads the engine hands back to its caller.

Invariants:
    - Schemas are built from store documents at the engine boundary
    - Field names match storage names (assigned_user, pending_tasks, ...)

Design Decisions:
    - Separate from models: schemas are caller contracts, models are persistence
"""
