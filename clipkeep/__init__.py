from clipkeep.history import HISTORY_KEY, MAX_HISTORY, HistoryStore
from clipkeep.poller import POLL_INTERVAL, ChangePoller

__version__ = "1.0.0"

__all__ = ["HistoryStore", "ChangePoller", "MAX_HISTORY", "HISTORY_KEY", "POLL_INTERVAL"]
