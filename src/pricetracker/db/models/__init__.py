from pricetracker.db.models.coin import Coin
from pricetracker.db.models.price import LatestPrice, PriceObservation

__all__ = [
    "Coin",
    "LatestPrice",
    "PriceObservation",
]
