"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Value types validate at construction; an instance is always valid

Design Decisions:
    - Functional core separated from imperative shell (repositories, HTTP, email)
"""
