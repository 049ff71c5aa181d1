"""Integration tests for components working together.

Coverage:
    - API endpoints with real HTTP requests through ASGI transport
    - Complete conversations with real decoding and scheduling
    - Live agent replies (when an API key is configured)
"""
