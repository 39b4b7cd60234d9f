"""Core infrastructure components."""

from bytestore.core.exceptions import ServiceError
from bytestore.core.state import AppState, get_app_state, init_app_state

__all__ = ["AppState", "ServiceError", "get_app_state", "init_app_state"]
