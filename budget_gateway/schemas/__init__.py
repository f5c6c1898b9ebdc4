"""Request Schemas: Pydantic bodies for the API boundary.

Invariants:
    - Required parameters are declared Optional and checked by the route,
      so the 400 message can name every required parameter of the endpoint
"""
