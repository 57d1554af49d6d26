"""Student Records Package: roster service over a pooled relational store.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
