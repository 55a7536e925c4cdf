"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Local conversation history and thread handle (ChatClient)
    - Chat message display with a thinking indicator
    - Error turns for every failed request

Contains minimal business logic. Delegates all operations to the API.
"""
