"""Infrastructure adapters (JWT signing, Redis caching)."""
