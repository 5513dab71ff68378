"""Telegram Application factory and the chat message handler."""

from __future__ import annotations

from typing import Any

from telegram import Update
from telegram.ext import Application, ApplicationBuilder, ContextTypes, MessageHandler, filters

from smartspend import get_logger
from smartspend.chat import ChatSession, ExpenseAssistant, ExpenseRecorder
from smartspend.config import Settings, get_settings
from smartspend.parsing import DEFAULT_TAXONOMY, load_taxonomy

LOGGER = get_logger("integrations.telegram")
ASSISTANT_KEY = "smartspend.assistant"
SESSION_KEY = "smartspend.session"

FAILURE_REPLY = "Sorry, I couldn't process that message right now. Please try again."


def build_assistant(
    settings: Settings, *, recorder: ExpenseRecorder | None = None
) -> ExpenseAssistant:
    """Create an ExpenseAssistant configured from Settings."""

    taxonomy = DEFAULT_TAXONOMY
    if settings.category_taxonomy_file is not None:
        taxonomy = load_taxonomy(settings.category_taxonomy_file)
    return ExpenseAssistant(
        taxonomy=taxonomy,
        recorder=recorder,
        threshold=settings.actionable_confidence,
        payment_method=settings.default_payment_method,
    )


def create_application(
    *,
    settings: Settings | None = None,
    assistant: ExpenseAssistant | None = None,
) -> Application:
    """Return a python-telegram-bot Application wired to the expense assistant."""

    resolved_settings = settings or get_settings()
    if resolved_settings.telegram_token is None:
        raise ValueError("TELEGRAM_TOKEN must be configured to start the Telegram bot.")

    token = resolved_settings.telegram_token.get_secret_value()
    application = ApplicationBuilder().token(token).build()
    application.bot_data[ASSISTANT_KEY] = assistant or build_assistant(resolved_settings)

    message_filter = filters.TEXT
    if resolved_settings.telegram_allowed_users:
        message_filter = message_filter & filters.User(
            user_id=resolved_settings.telegram_allowed_users
        )
    application.add_handler(MessageHandler(message_filter, handle_message))
    LOGGER.info(
        "Telegram application ready (allowed users=%s).",
        resolved_settings.telegram_allowed_users or "everyone",
    )
    return application


def get_assistant(source: Any) -> ExpenseAssistant:
    """Return the assistant stored on the Application, or a default one."""

    application = source if isinstance(source, Application) else getattr(
        source, "application", None
    )
    bot_data = getattr(application, "bot_data", None)
    if isinstance(bot_data, dict):
        stored = bot_data.get(ASSISTANT_KEY)
        if isinstance(stored, ExpenseAssistant):
            return stored
    return ExpenseAssistant()


def get_session(context: Any) -> ChatSession:
    """Return the ChatSession kept in ``context.chat_data``, creating it on demand."""

    chat_data = getattr(context, "chat_data", None)
    if not isinstance(chat_data, dict):
        return ChatSession()
    session = chat_data.get(SESSION_KEY)
    if not isinstance(session, ChatSession):
        session = ChatSession()
        chat_data[SESSION_KEY] = session
    return session


def _extract_message_data(update: Update) -> tuple[str | None, int | None]:
    message = getattr(update, "message", None) or getattr(update, "edited_message", None)
    text = getattr(message, "text", None) if message is not None else None
    text = text.strip() if isinstance(text, str) and text.strip() else None
    chat = getattr(update, "effective_chat", None) or getattr(message, "chat", None)
    chat_id = getattr(chat, "id", None)
    return text, chat_id


async def _reply_text(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    text: str,
    chat_id: int | None,
) -> None:
    if not text:
        return
    target = getattr(update, "effective_message", None)
    if target is not None and hasattr(target, "reply_text"):
        await target.reply_text(text)
        return
    if chat_id is not None:
        await context.bot.send_message(chat_id=chat_id, text=text)


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle free-form expense messages and chat commands."""

    text, chat_id = _extract_message_data(update)
    if not text:
        return

    assistant = get_assistant(context)
    session = get_session(context)
    try:
        reply = assistant.handle_message(text, session)
    except Exception as exc:
        LOGGER.exception("Telegram update failed to process (chat_id=%s)", chat_id, exc_info=exc)
        await _reply_text(update, context, FAILURE_REPLY, chat_id)
        return

    await _reply_text(update, context, reply.text, chat_id)


__all__ = [
    "ASSISTANT_KEY",
    "SESSION_KEY",
    "build_assistant",
    "create_application",
    "get_assistant",
    "get_session",
    "handle_message",
]
