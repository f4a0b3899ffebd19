"""Command grammar for inbound message bodies."""

import re

_EMPHASIS = re.compile(r"[*_~]")
_WHITESPACE = re.compile(r"\s+")

GLOBAL_COMMANDS = frozenset({"MENU", "CANCEL"})
AFFIRMATIVE = "YES"
CLAIM_KEYWORD = "ACCEPT"


def normalize(text: str) -> str:
    """Strip emphasis markers and whitespace noise, then upper-case."""
    cleaned = _EMPHASIS.sub("", text)
    return _WHITESPACE.sub(" ", cleaned).strip().upper()


def is_global_command(command: str) -> bool:
    return command in GLOBAL_COMMANDS


def parse_claim(command: str) -> str | None:
    """Return the job id token of an ``ACCEPT <job_id>`` command.

    The token is returned unparsed so that callers can answer a malformed id
    the same way as an unknown one.
    """
    parts = command.split(" ")
    if len(parts) < 2 or parts[0] != CLAIM_KEYWORD:  # noqa: PLR2004
        return None
    return parts[1].lstrip("#")


def parse_job_id(token: str) -> int | None:
    """Parse a job id token, returning None when it is not a positive integer."""
    if not token.isdigit():
        return None
    value = int(token)
    return value if value > 0 else None


def is_affirmative(command: str) -> bool:
    return command == AFFIRMATIVE
