"""Infrastructure: settings, database engine/session, logging."""
