"""SQLite persistence: engine, table builder, models and repositories."""
