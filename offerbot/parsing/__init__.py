"""
Criteria parsing.

Responsibilities:
- Classify short free text into cuisine, restaurant, location and time facets.
- Fall back to the user's saved and recent locations where the text allows it.
- Record every parse to the search history.
"""
