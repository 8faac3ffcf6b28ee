"""Application layer: services, persistence adapters and the command line."""

from .app import MnemonicPegsApp

__all__ = ["MnemonicPegsApp"]
