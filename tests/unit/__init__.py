"""Unit tests for individual components in isolation.

Coverage:
    - engine/: timeline, registry, scheduler, session controller and gate
    - parsing/: document decoding
    - agent/: configuration, prompt building and scripted replies

The Agno agent is mocked; no API calls are made.
"""
