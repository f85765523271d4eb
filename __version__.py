"""Version information for hookdeploy."""

__version__ = "1.0.0"
