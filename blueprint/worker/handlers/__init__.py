from .handler_registry import HANDLERS, get_handler

__all__ = ["HANDLERS", "get_handler"]
