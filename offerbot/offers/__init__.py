"""
Offer ranking and formatting engine.

Responsibilities:
- Build the restaurant query from parsed criteria.
- Fetch today's active offer events for the candidate restaurants.
- Bucket them into "next two hours" and "on later", nearest first.
- Render a size-capped, paginated chat message.
"""
