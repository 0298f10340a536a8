"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build prompts that embed the user context and the exact JSON shape wanted.
- Call the Groq LLM and hand raw text back to the extraction layer.
- Report every oracle problem as a single ``GenerationFailure``.
"""
