"""Infrastructure Layer: database sessions, per-event locks, structured logging.

Invariants:
    - Infrastructure never makes scheduling decisions; it only provides IO and coordination primitives
"""
