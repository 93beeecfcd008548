"""HR Portal API - job and tender offers, applications and archives."""

__version__ = "0.1.0"
