"""Goal Tracker Application Package — authenticated, owner-scoped goal tracking.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
