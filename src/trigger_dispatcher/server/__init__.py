"""FastAPI recording endpoint stub.

Accepts the same wire payloads a real recording endpoint does and keeps what
it receives in memory. Useful for dry runs of an experiment and for
integration tests of the dispatcher.
"""

from __future__ import annotations

__all__ = ["create_app"]

from trigger_dispatcher.server.app import create_app
