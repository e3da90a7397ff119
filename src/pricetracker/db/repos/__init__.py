from pricetracker.db.repos.coin_repo import CoinRepo
from pricetracker.db.repos.price_repo import PriceRepo

__all__ = ["CoinRepo", "PriceRepo"]
