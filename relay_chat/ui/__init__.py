"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - PIN login against the relay's login endpoint
    - Chat message display with streaming updates
    - File selection and forwarding, separate from the chat stream

Chat state lives in relay_chat.chat; this package only renders it.
"""
