"""CLI entrypoint for the SmartSpend expense assistant."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence, TextIO
from urllib.parse import urlparse

from smartspend import get_logger, set_log_level
from smartspend.chat import ChatSession, ExpenseAssistant
from smartspend.config import get_settings
from smartspend.integrations import build_assistant, create_application

LOGGER = get_logger("app")

_PROMPT = "you> "
_EXIT_COMMANDS = {"/quit", "/exit"}


class _RunMode:
    POLLING = "polling"
    WEBHOOK = "webhook"
    CONSOLE = "console"


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the SmartSpend expense assistant on Telegram or in a terminal."
    )
    parser.add_argument(
        "--mode",
        choices=(_RunMode.POLLING, _RunMode.WEBHOOK, _RunMode.CONSOLE),
        default=_RunMode.POLLING,
        help="Execution mode (default: polling).",
    )
    parser.add_argument(
        "--listen",
        default="0.0.0.0",
        help="IP address or host to listen on when running the webhook server.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8443,
        help="TCP port for the webhook listener (default: 8443).",
    )
    parser.add_argument(
        "--webhook-url",
        help="Full HTTPS URL Telegram should call when running in webhook mode.",
    )
    parser.add_argument(
        "--drop-pending-updates",
        action="store_true",
        help="Drop pending Telegram updates before starting.",
    )
    args = parser.parse_args(argv)
    if args.mode == _RunMode.WEBHOOK and not args.webhook_url:
        parser.error("--webhook-url is required when --mode webhook")
    return args


def _resolve_webhook_path(webhook_url: str) -> str:
    return urlparse(webhook_url).path.strip("/")


def run_console(
    assistant: ExpenseAssistant,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Chat with the assistant over plain text streams until EOF or /quit."""

    source = stdin or sys.stdin
    sink = stdout or sys.stdout
    session = ChatSession()
    sink.write("Tell me about an expense (/help for examples, /quit to leave).\n")
    while True:
        sink.write(_PROMPT)
        sink.flush()
        line = source.readline()
        if not line:
            break
        text = line.strip()
        if text.lower() in _EXIT_COMMANDS:
            break
        if not text:
            continue
        reply = assistant.handle_message(text, session)
        sink.write(f"bot> {reply.text}\n")
    sink.write("\n")
    return len(session.recorded)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = get_settings()
    set_log_level(settings.log_level)

    if args.mode == _RunMode.CONSOLE:
        recorded = run_console(build_assistant(settings))
        LOGGER.info("Console session finished with %d recorded expense(s).", recorded)
        return

    application = create_application(settings=settings)
    drop_updates_value = True if args.drop_pending_updates else None
    if args.mode == _RunMode.POLLING:
        LOGGER.info("Starting Telegram polling (dropping pending=%s)", drop_updates_value)
        application.run_polling(drop_pending_updates=drop_updates_value)
        return

    webhook_path = _resolve_webhook_path(args.webhook_url)
    LOGGER.info(
        "Starting Telegram webhook listener on %s:%d/%s (webhook=%s)",
        args.listen,
        args.port,
        webhook_path,
        args.webhook_url,
    )
    application.run_webhook(
        listen=args.listen,
        port=args.port,
        webhook_url=args.webhook_url,
        url_path=webhook_path,
        drop_pending_updates=drop_updates_value,
        secret_token=settings.telegram_webhook_secret,
    )


if __name__ == "__main__":
    main()
