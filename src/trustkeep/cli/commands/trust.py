"""Trust list commands: add, remove, list, and an interactive shell."""

from __future__ import annotations

import argparse
import logging
import shlex
import sys

from ...core.exceptions import TrustKeepException
from ...trust.controller import TrustController
from ...trust.identity import Principal
from ..output import output_error, output_result
from ..utils import open_session

logger = logging.getLogger(__name__)

SHELL_EXIT_WORDS = ("exit", "quit")


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the trust commands on the CLI parser."""
    add_parser = subparsers.add_parser("add", help="Trust one or more principals")
    add_parser.add_argument("names", nargs="+", help="Names of principals to trust")
    add_parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Skip the confirmation prompt",
    )
    add_parser.set_defaults(func=cmd_add)

    remove_parser = subparsers.add_parser("remove", help="Stop trusting one or more principals")
    remove_parser.add_argument("names", nargs="+", help="Names of principals to remove")
    remove_parser.set_defaults(func=cmd_remove)

    list_parser = subparsers.add_parser("list", help="List trusted principals")
    list_parser.add_argument("owner", nargs="?", help="Another owner (needs trust.list.others)")
    list_parser.set_defaults(func=cmd_list)

    shell_parser = subparsers.add_parser("shell", help="Run trust commands interactively")
    shell_parser.set_defaults(func=cmd_shell)


def _missing_actor(args: argparse.Namespace) -> int:
    if args.actor:
        output_error(f"Unknown principal: {args.actor}")
    else:
        output_error("No acting principal. Pass --as <name>")
    return 1


def _run(args: argparse.Namespace, command: list[str]) -> int:
    controller, actor = open_session(args)
    if actor is None:
        return _missing_actor(args)
    try:
        result = controller.dispatch(actor, command)
        output_result(result, controller.resolver)
        return 0 if result.ok else 1
    finally:
        _close(controller)


def _close(controller: TrustController) -> None:
    try:
        controller.close()
    except TrustKeepException as e:
        output_error(f"Failed to save trust records: {e}")


def cmd_add(args: argparse.Namespace) -> int:
    """Trust principals, asking for confirmation unless --yes is given."""
    controller, actor = open_session(args)
    if actor is None:
        return _missing_actor(args)
    if args.yes:
        controller.require_confirmation = False

    try:
        result = controller.dispatch(actor, ["add", *args.names])
        output_result(result, controller.resolver)
        if not result.ok:
            return 1
        if not controller.confirmations.contains_key(actor.identity):
            return 0

        try:
            answer = input("Confirm? [y/N] ")
        except EOFError:
            answer = ""
        verb = "confirm" if answer.strip().lower() in ("y", "yes") else "cancel"
        result = controller.dispatch(actor, [verb])
        output_result(result, controller.resolver)
        return 0 if result.ok else 1
    finally:
        _close(controller)


def cmd_remove(args: argparse.Namespace) -> int:
    """Stop trusting principals."""
    return _run(args, ["remove", *args.names])


def cmd_list(args: argparse.Namespace) -> int:
    """List the actor's trustees, or another owner's."""
    command = ["list"]
    if args.owner:
        command.append(args.owner)
    return _run(args, command)


def cmd_shell(args: argparse.Namespace) -> int:
    """Read trust commands from stdin until EOF or 'exit'.

    ``as <name>`` switches the acting principal. Pending confirmations
    live as long as the shell does.
    """
    controller, actor = open_session(args)
    interactive = sys.stdin.isatty()
    failures = 0
    try:
        while True:
            if interactive:
                prompt = f"{actor.name}> " if actor else "> "
                print(prompt, end="", flush=True)
            line = sys.stdin.readline()
            if not line:
                break
            try:
                words = shlex.split(line)
            except ValueError as e:
                output_error(str(e))
                failures += 1
                continue
            if not words:
                continue
            if words[0].lower() in SHELL_EXIT_WORDS:
                break
            if words[0].lower() == "as":
                actor = _switch_actor(controller, words[1:]) or actor
                continue
            if actor is None:
                output_error("No acting principal. Use: as <name>")
                failures += 1
                continue
            result = controller.dispatch(actor, words)
            output_result(result, controller.resolver)
            if not result.ok:
                failures += 1
    finally:
        _close(controller)
    return 0 if failures == 0 else 1


def _switch_actor(controller: TrustController, words: list[str]) -> Principal | None:
    if len(words) != 1:
        output_error("Usage: as <name>")
        return None
    principal = controller.resolver.resolve(words[0])
    if principal is None:
        output_error(f"Unknown principal: {words[0]}")
        return None
    logger.debug(f"Shell actor is now {principal.identity}")
    return principal
