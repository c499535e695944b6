"""
CollabNotes Backend - Concurrent note editing control

Edit locks, append-only version history and sharing permissions for a
collaborative note-taking service.
"""

__version__ = "1.0.0"
