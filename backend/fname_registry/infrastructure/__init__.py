"""Infrastructure Layer - database, signing and logging adapters.

Invariants:
    - Adapters translate library failures into core/errors.py types or
      documented return values

Design Decisions:
    - One module per external concern (storage, signing, logging)
"""
