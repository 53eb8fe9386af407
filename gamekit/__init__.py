"""Building blocks for game backends: framing, player models, configuration, logging and store checks."""

__version__ = "0.1.0"

__all__ = [
    "appstore",
    "appstore_notify",
    "framing",
    "googleplay",
    "log",
    "mathx",
    "models",
    "notify",
    "options",
    "response",
    "skiplist",
]