from spotrate.models.users import User
from spotrate.models.spots import Spot
from spotrate.models.reviews import Review
from spotrate.models.ratings import SoloRating

__all__ = ["User", "Spot", "Review", "SoloRating"]
