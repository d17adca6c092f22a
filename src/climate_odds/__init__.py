"""Climate Odds: historical probability of weather conditions."""

__version__ = "1.0.0"
