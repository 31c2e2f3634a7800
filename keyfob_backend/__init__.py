"""
keyfob_backend - HTTP simulator for the keyfob.

One Flask app hosts one simulated device. Buttons are pressed and released
through the API; the display frame and the typed codes are read back.
"""

from .app import create_app

__all__ = ['create_app']
