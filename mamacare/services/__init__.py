"""
High-level use cases for the MamaCare API.

Routers call these services instead of touching the repository, the mailer or
the token service directly.
"""
