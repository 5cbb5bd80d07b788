"""Handlers package."""

from fanout_listener.handlers.listener import listen, run_listener_loop

__all__ = ["listen", "run_listener_loop"]
