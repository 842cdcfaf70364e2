from cryptoglance.infrastructure.db.models.watchlist import WatchlistItemModel

__all__ = ["WatchlistItemModel"]
