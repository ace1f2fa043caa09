"""Period returns and indexed performance for two-column time series."""

__version__ = "0.1.0"
