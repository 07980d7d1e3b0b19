"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Ride is the aggregate root for its RideRequests

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from rideboard.models.ride import Ride  # noqa: F401
from rideboard.models.ride_request import RideRequest  # noqa: F401
from rideboard.models.message import Message  # noqa: F401
