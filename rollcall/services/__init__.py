"""Service Layer: the imperative shell around the pure core.

Invariants:
    - Services own transactions (commit / rollback); core functions never do IO
    - Attendance rows are written only through services/attendance_store.py,
      driven by services/participant_ledger.py
"""
