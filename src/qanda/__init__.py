"""
Package: qanda
Description: Live audience Q&A backend.

Attendees ask questions under an event and vote them up; the event's
moderator hides questions or marks them answered using the secret
handed out when the event was created.
"""

__version__ = "0.1.0"
