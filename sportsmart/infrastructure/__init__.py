"""Infrastructure: configuration, database and logging setup."""
