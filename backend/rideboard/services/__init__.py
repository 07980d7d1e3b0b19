"""Services Layer — transaction scripts around the pure core.

Invariants:
    - One public method == one transaction, committed at the end
    - Services talk to the DB only through infrastructure/ride_store (messages excepted)
"""
