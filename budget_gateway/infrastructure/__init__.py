"""Infrastructure Layer: external client adapter, guard singleton, logging setup.

Invariants:
    - Infrastructure never imports from api/
    - Every actualpy call runs off the event loop
"""
