"""Core package: configuration, authentication and errors."""
