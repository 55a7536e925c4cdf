"""Assistant Chat - web chat client for a hosted OpenAI assistant.

Combines FastAPI for the chat turn endpoint, the OpenAI SDK for threads and
runs, NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoint and error mapping
    - assistant: Thread/run orchestration and upstream error classification
    - ui: Chat client state and web interface
    - models: Request/response schemas
"""

__version__ = "0.1.0"
