"""Integration tests for the HTTP API.

Drives the real FastAPI app through httpx.ASGITransport, with the
webhooks behind it replaced by an in-process stub.
"""
