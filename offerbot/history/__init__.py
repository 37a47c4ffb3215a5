"""
Per-user search history and saved named locations.

Both stores are consumed through small async protocols; the in-memory
implementations back the HTTP app and the tests.
"""
