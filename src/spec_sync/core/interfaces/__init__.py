"""Core interfaces/abstractions.

Why:
- Defines contracts (Protocol) implemented by concrete adapters.
- Inverts dependencies: the Core depends on abstractions, not on httpx or files.
"""

from spec_sync.core.interfaces.postman import PostmanGateway
from spec_sync.core.interfaces.state_store import StateStore

__all__ = ["PostmanGateway", "StateStore"]
