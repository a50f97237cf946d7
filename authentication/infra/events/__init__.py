from .listeners import register_authentication_listeners


__all__ = ["register_authentication_listeners"]
