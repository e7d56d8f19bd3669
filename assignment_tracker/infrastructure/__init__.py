"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports engine logic from services/
    - All database calls wrapped with rollback and error mapping

Design Decisions:
    - The document store adapter satisfies a core Protocol, so the engine can be
      pointed at any store with the same six calls
"""
