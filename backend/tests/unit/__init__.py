"""
Unit tests package.

Services are tested against mocked repositories and a unit of work over a
mock session; no database or HTTP server is involved.
"""
