"""Services Layer — storage-backed operations over the entity store.

Invariants:
    - Every uniqueness invariant is enforced by a database constraint,
      never by an in-process lock
    - Expected constraint violations surface as WhiteloopError subclasses

Design Decisions:
    - One service class per component (repository, coordinator, pipeline)
"""
