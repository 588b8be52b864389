"""
Kiosk Services.

Stateful pieces of the kiosk core. Currently the in-memory order session.
"""

from .session import KioskSession

__all__ = ["KioskSession"]
