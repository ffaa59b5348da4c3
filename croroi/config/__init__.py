"""Environment-driven configuration and logging setup."""
