"""Core: error hierarchy and boundary protocols.

Invariants:
    - Core NEVER imports from infrastructure or api (dependency arrows point inward)
"""
