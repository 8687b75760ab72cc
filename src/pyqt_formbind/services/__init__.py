"""Qt services shared by accessors and directives."""

from .signal_service import SignalService

__all__ = ["SignalService"]
