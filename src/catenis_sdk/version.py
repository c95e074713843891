"""Version information for the Catenis Python SDK"""

__version__ = "1.0.0"
