"""
Swipe deck.

Responsibilities:
- Filter an enriched suggestion batch (nearby / budget / trending).
- Track the swipe cursor and the like/pass interaction log.
- Report interactions through a fire-and-forget side channel.
"""
