"""Link-in-bio publishing service."""

__version__ = "0.1.0"
