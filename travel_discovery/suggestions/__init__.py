"""
Suggestion generation pipeline.

Responsibilities:
- Build the user context (location, city, interests, time of day, weather).
- Turn oracle free text into validated suggestion / local discovery payloads.
- Fall back to deterministic content whenever generation or parsing fails.
"""
