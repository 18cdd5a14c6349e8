"""Forum API - threads, comments and TOTP-elevated moderation."""

__version__ = "0.1.0"
