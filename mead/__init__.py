"""MeAd explorer: browse medical conditions and geographic regions."""

__version__ = "1.0.0"
