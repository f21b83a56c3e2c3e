"""Framework adapters exposing a read-only HTTP view of the registry."""
