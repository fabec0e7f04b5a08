"""Custom exception hierarchy for the trade intelligence engine."""


class TradingIntelError(Exception):
    """Base exception for all engine errors."""


# --- Configuration ---
class ConfigError(TradingIntelError):
    """Invalid or unreadable configuration."""


# --- Input ---
class InvalidInput(TradingIntelError):
    """Caller-supplied data cannot be interpreted.

    Raised for unparseable timestamps, non-numeric P&L and structurally
    invalid trade intents.  The whole operation fails; no partial output
    is produced.
    """

    def __init__(self, message: str, field: str = ""):
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)
