"""Core configuration, limits and error handling."""
