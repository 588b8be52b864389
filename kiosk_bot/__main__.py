"""
Console driver for the kiosk core.

Reads finalized transcripts from stdin, one per line, and prints what the
kiosk would say. Lines starting with ':' stand in for the collaborators
that are not part of the core (camera, TTS, payment terminal).

Usage:
    python -m kiosk_bot
    python -m kiosk_bot --language en
    python -m kiosk_bot --catalog menu.json

Commands:
    :customer [age_group] [gender]   customer detected (e.g. ":customer 20s female")
    :tts                             TTS finished speaking
    :pay                             payment terminal approved
    :fail                            payment terminal declined
    :retry                           retry after an error
    :reset                           back to IDLE
    :cart                            print the cart
    :quit                            exit
"""

from dotenv import load_dotenv

load_dotenv()

import argparse
import sys

from . import config
from .catalog import load_catalog_file, load_sample_catalog
from .dispatcher import KioskController
from .errors import CatalogError
from .logging_config import setup_logging
from .message_builder import message_builder
from .models import CustomerProfile


def _print_cart(controller: KioskController) -> None:
    session = controller.state
    if not session.cart:
        print("  (cart is empty)")
        return
    for item in session.cart:
        line = message_builder.build_line_item(item, session.language)
        print(f"  [{item.id}] {line} - {message_builder.format_price(item.total_price, session.language)}")
    print(f"  Total: {message_builder.format_price(session.cart_total, session.language)}")


def _run_command(controller: KioskController, command: str, args: list[str]):
    if command == "customer":
        profile = CustomerProfile(
            age_group=args[0] if len(args) > 0 else None,
            gender=args[1] if len(args) > 1 else None,
        )
        return controller.on_customer_detected(profile)
    if command == "tts":
        return controller.on_tts_completed()
    if command == "pay":
        return controller.on_payment_completed()
    if command == "fail":
        return controller.on_payment_failed()
    if command == "retry":
        return controller.retry()
    if command == "reset":
        return controller.reset()
    if command == "cart":
        _print_cart(controller)
        return None
    print(f"  unknown command ':{command}'")
    return None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="kiosk_bot", description="Voice kiosk console driver")
    parser.add_argument("--catalog", default=config.KIOSK_CATALOG_PATH, help="JSON catalog file")
    parser.add_argument("--language", default=config.DEFAULT_LANGUAGE, choices=config.SUPPORTED_LANGUAGES)
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        catalog = load_catalog_file(args.catalog) if args.catalog else load_sample_catalog()
    except CatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    controller = KioskController(catalog, language=args.language)
    print(f"Kiosk ready ({len(catalog)} products). Type ':customer' to start, ':quit' to exit.")

    for line in sys.stdin:
        line = line.strip()
        if not line:
            continue
        if line.startswith(":"):
            command, *rest = line[1:].split() or [""]
            if command == "quit":
                break
            result = _run_command(controller, command, rest)
        else:
            result = controller.handle_transcript(line)

        if result is not None and result.message:
            print(f"kiosk> {result.message}")
        print(f"  [{controller.state.current_state.value}]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
