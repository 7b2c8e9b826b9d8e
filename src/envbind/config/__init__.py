"""Configuration: the CLI's own settings and logging setup."""
