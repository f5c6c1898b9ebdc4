"""Route Modules: one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes never contain budgeting logic (delegate to the BudgetClient)
    - Required parameters are checked before the client guard is touched
"""
