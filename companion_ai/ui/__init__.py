"""NiceGUI interface - thin visualization layer over the chat session.

Responsibilities:
    - Login screen in front of the session
    - Chat timeline with a composing indicator while a reply is pending
    - Upload dialog and removable attachment chips
    - Profile and about pages

Contains no conversation logic; renders session engine state only.
"""
