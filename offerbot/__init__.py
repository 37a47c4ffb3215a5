"""
Restaurant offer search bot.

Responsibilities:
- Parse short free-text phrases into structured search criteria.
- Keep a refreshed snapshot of the partner catalog for name matching.
- Rank today's discount offers and format them into a paginated chat message.
"""
