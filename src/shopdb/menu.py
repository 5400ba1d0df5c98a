"""Interactive menu: log in as a role, then run that role's actions.

Usage:
    shopdb [--db-url sqlite:///shop.db] [--log-file logs.txt]
    python -m shopdb.menu ...
"""

import argparse
import logging
import sys
from typing import Callable

from shopdb import create_accessor
from shopdb.config import DEFAULT_LOG_FILE, Role, ShopConfig
from shopdb.errors import AccessorError, DatabaseConnectionError
from shopdb.logging_config import configure_logging, get_accessor_logger, shutdown_logging
from shopdb.roles import ROLE_ACTIONS, RoleAction
from shopdb.service import DatabaseAccessor

logger = logging.getLogger(__name__)

MAIN_CHOICES = {1: Role.ADMIN, 2: Role.MANAGER, 3: Role.CUSTOMER}
EXIT_CHOICE = 4
BACK_CHOICE = 0
INVALID_CHOICE = "Invalid choice. Please try again."

Prompt = Callable[[str], str]


def show_main_menu() -> None:
    for number, role in MAIN_CHOICES.items():
        print(f"{number}. Login as {role.label}")
    print(f"{EXIT_CHOICE}. Exit")


def read_choice(prompt: Prompt) -> int | None:
    """Read an integer menu choice; None if the input is not an integer."""
    try:
        return int(prompt("> ").strip())
    except ValueError:
        return None


def run_action(db: DatabaseAccessor, action: RoleAction, prompt: Prompt) -> None:
    try:
        args = [convert(prompt(text).strip()) for text, convert in action.fields]
    except ValueError:
        print("Invalid input.")
        return

    try:
        result = action.func(db, *args)
    except AccessorError as e:
        # already logged by the accessor
        print(f"Error: {e}")
        return
    print(action.done.format(result=result))


def role_session(
    role: Role,
    dsn: str,
    prompt: Prompt,
    accessor_logger: logging.Logger | None = None,
) -> None:
    """Hold one connection for the role until the user goes back."""
    actions = ROLE_ACTIONS[role]
    try:
        db = create_accessor(dsn, accessor_logger)
    except DatabaseConnectionError as e:
        print(f"Could not connect as {role.label}: {e}")
        return

    with db:
        logger.info("Logged in as %s", role.label)
        while True:
            print(f"-- {role.label} --")
            for number, action in enumerate(actions, start=1):
                print(f"{number}. {action.label}")
            print(f"{BACK_CHOICE}. Back")

            choice = read_choice(prompt)
            if choice == BACK_CHOICE:
                return
            if choice is None or not 1 <= choice <= len(actions):
                print(INVALID_CHOICE)
                continue
            run_action(db, actions[choice - 1], prompt)


def run_menu(
    config: ShopConfig,
    prompt: Prompt | None = None,
    accessor_logger: logging.Logger | None = None,
) -> None:
    """Main loop. Returns on Exit or end of input."""
    prompt = prompt or input
    try:
        while True:
            show_main_menu()
            choice = read_choice(prompt)
            if choice == EXIT_CHOICE:
                return
            role = MAIN_CHOICES.get(choice)
            if role is None:
                print(INVALID_CHOICE)
                continue
            role_session(role, config.dsn_for(role), prompt, accessor_logger)
    except EOFError:
        print()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Shop order/product database menu")
    parser.add_argument(
        "--db-url", help="Connection string for every role (overrides SHOPDB_<ROLE>_DSN)"
    )
    parser.add_argument(
        "--log-file", help=f"Log file (default: $SHOPDB_LOG_FILE or {DEFAULT_LOG_FILE})"
    )
    args = parser.parse_args(argv)

    try:
        config = ShopConfig.from_env(db_url=args.db_url, log_file=args.log_file)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        handler = configure_logging(config.log_file)
    except OSError as e:
        print(f"Cannot open log file {config.log_file}: {e}", file=sys.stderr)
        sys.exit(1)
    logger.info("Starting shop menu")
    try:
        run_menu(config, accessor_logger=get_accessor_logger())
    finally:
        logger.info("Exiting shop menu")
        shutdown_logging(handler)


if __name__ == "__main__":
    main()
