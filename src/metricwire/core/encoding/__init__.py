"""Encoders for exporting registry contents."""
