"""Database connection wrapper and persisted schema version bookkeeping."""
