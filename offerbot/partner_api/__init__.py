"""
Partner catalog API access.

Responsibilities:
- Manage partner API configuration and credentials.
- Issue catalog, geocoding, restaurant and offer event requests.
"""
