"""Infrastructure Layer — database engine, SQL repositories, logging setup.

Invariants:
    - Infrastructure implements the Protocols in core/repository_protocols.py
    - Storage failures are mapped to ServiceUnavailableError, never retried here
"""
