"""Core package: configuration and logging for the dashboard filter runtime."""
