"""Rideboard — campus ride-sharing bulletin board backend.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
