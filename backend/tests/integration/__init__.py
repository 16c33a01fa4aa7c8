"""
Integration tests package.

Drives the Flask test client against an in-memory SQLite database.
"""
