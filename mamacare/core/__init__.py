"""
Core utilities shared across the MamaCare API.

This package hosts configuration, the error taxonomy, credential hashing,
session tokens, the rate limiter and the mail adapter.
Services depend on these primitives instead of reading the environment or
talking to SMTP directly.
"""
