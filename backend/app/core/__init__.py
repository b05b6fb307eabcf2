"""Core Layer — domain logic with no storage, no HTTP, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions are deterministic given their inputs; the token service reads an injected clock

Design Decisions:
    - Functional core separated from imperative shell: services orchestrate IO around it
"""
