"""Core: client capability contract, bootstrap state machine, errors, amount helpers.

Invariants:
    - Core never imports from api/ or infrastructure/
    - Core never imports the actualpy library
"""
