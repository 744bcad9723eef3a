"""Core Layer: pure scheduling logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic (callers pass "today" and "now" in)

Design Decisions:
    - Functional core separated from imperative shell: the ledger's decisions live
      here, the transaction and locking around them live in services/
"""
