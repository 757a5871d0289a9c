"""Infrastructure Layer — database, repositories, email client, logging.

Invariants:
    - Infrastructure never holds business rules; it only persists and transports
    - All external failures mapped to typed errors (core/errors.py)
"""
