"""
StuntCheck Gateway — ORM Models
================================

Importing this package registers every table with `Base.metadata`
(used by Alembic autogenerate and by the test suite).
"""

from stuntcheck.models.child import Child
from stuntcheck.models.prediction import Prediction
from stuntcheck.models.profile import Profile

__all__ = ["Child", "Prediction", "Profile"]
