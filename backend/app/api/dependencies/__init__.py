"""Shared FastAPI dependencies."""

from .accounts import ControllerRegistry, RequestContext, get_controller, get_registry, get_request_context

__all__ = [
    "ControllerRegistry",
    "RequestContext",
    "get_controller",
    "get_registry",
    "get_request_context",
]
