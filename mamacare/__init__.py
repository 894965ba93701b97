"""MamaCare backend: account lifecycle, session tokens and request gating."""

__version__ = "1.0.0"
