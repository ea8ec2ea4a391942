"""Services Layer - imperative shell around the pure transfer rules.

Invariants:
    - Services orchestrate IO (repository, signing) around core/ decisions
    - No HTTP types in services; routes translate results into responses
"""
