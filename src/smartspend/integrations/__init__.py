"""Chat front-end integrations for the expense assistant."""

from .telegram import build_assistant, create_application, handle_message

__all__ = ["build_assistant", "create_application", "handle_message"]
