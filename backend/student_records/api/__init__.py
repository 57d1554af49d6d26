"""API Layer: FastAPI routes, dependencies, rendering and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Routes never import the SQL layer; they receive a StudentRepository
"""
