"""Unit tests for individual components in isolation.

Coverage:
    - chat/: frame decoding, session store, chat turns
    - relay/: configuration and webhook forwarding
    - auth/: credential lookup
"""
