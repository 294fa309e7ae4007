"""
Event handler registration.
"""

from .event_setup import setup_event_handlers, initialize_event_system
