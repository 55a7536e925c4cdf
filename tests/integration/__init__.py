"""Integration tests for components working together as a system.

Coverage:
    - POST /api/chat with every boundary status code
    - Thread resumption across turns
    - Live round trips when OPENAI_API_KEY and OPENAI_ASSISTANT_ID are set
"""
