"""regcheck — audit container registry repositories for manifest integrity."""

__version__ = "0.1.0"
