"""Services Layer — the boundary operations exposed to the HTTP routes.

Invariants:
    - Every goal operation takes the authenticated identity id as its first argument
    - Services talk to storage only through the repository Protocols
"""
