"""Test package for Companion AI.

Structure:
    - unit/: Individual engine, parsing and agent components
    - integration/: HTTP endpoints and full conversations

Sessions use the scripted responder or a controllable test double; the
live agent test only runs when an API key is configured. Leverages pytest
with pytest-check for soft assertions.
"""
