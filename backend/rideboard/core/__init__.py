"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Functions are deterministic: ids and "now" are passed in by the shell

Design Decisions:
    - Functional core, imperative shell: services load state, call core, persist the result
"""
