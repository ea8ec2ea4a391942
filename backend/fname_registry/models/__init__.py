"""ORM Models - SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - All models imported here so Base.metadata is complete for create_all
      and alembic autogenerate
"""

from fname_registry.models.transfer import Transfer  # noqa: F401
