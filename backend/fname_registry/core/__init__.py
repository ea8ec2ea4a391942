"""Core Layer - pure transfer rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (the clock is passed in)

Design Decisions:
    - Functional core separated from imperative shell: the transfer state
      machine is testable without a database or a signing key
"""
