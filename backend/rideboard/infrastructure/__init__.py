"""Infrastructure — database session management, SQL ride store, logging setup."""
