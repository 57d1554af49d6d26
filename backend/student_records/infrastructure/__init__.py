"""Infrastructure: pooled store access, schema setup, persistence and logging.

Invariants:
    - Only this package imports the database driver layer (SQLAlchemy engine)
"""
