"""Test package for Relay Chat.

Structure:
    - unit/: Individual function and class tests
    - integration/: HTTP-level tests against the FastAPI app

Webhooks are simulated with httpx.MockTransport, so no external service
is needed. Leverages pytest with pytest-check for soft assertions.
"""
