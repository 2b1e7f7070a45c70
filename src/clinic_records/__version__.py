"""Version information for clinic-records."""

__version__ = "0.3.0"
