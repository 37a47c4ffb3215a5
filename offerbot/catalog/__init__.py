"""
Partner catalog snapshot.

Responsibilities:
- Refresh the known cuisine types and restaurant names in the background.
- Match free text against them without a network call per request.
"""
