"""Unit tests for individual components in isolation.

Coverage:
    - assistant/: Configuration, error classification, orchestration, OpenAI boundary
    - ui/: Chat client request cycle and state

Uses the fake assistant service or mocks for external services.
"""
