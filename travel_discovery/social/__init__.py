"""
Social signal layer.

Responsibilities:
- Define the read-only social data contract (friend activity, community
  ratings, trending places).
- Provide the in-process static source used until a remote one exists.
- Overlay those signals onto generated suggestions without mutating them.
"""
