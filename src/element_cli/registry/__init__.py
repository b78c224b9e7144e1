"""Block registry clients."""

from .contracts import RegistryClient
from .http import HttpRegistryClient

__all__ = ["RegistryClient", "HttpRegistryClient"]
