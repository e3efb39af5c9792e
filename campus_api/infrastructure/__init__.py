"""Infrastructure — database sessions, credentials and logging setup."""
