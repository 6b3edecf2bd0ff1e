"""Version information for neo-tenancy."""

__version__ = "0.1.0"
