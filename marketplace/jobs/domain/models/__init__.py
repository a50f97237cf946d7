from .completion import CompletionTracking


__all__ = ["CompletionTracking"]
