"""Infrastructure adapters: database, email transport and realtime delivery."""
