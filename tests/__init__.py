"""Test package for Assistant Chat.

Structure:
    - unit/: Individual function and class tests
    - integration/: Endpoint tests over ASGITransport, plus opt-in live tests
    - fakes.py: In-memory assistant service used instead of the OpenAI API

Leverages pytest with pytest-asyncio and pytest-check for soft assertions.
"""
