"""Task tracking service with email notifications and inbox checks."""

__version__ = "0.1.0"
