"""Console I/O helpers for user-facing messages."""

from __future__ import annotations

import json


def say(message: str) -> None:
    """Print a normal message to stdout.

    Args:
        message: Text to print.

    Returns:
        None.

    Example:
        >>> say("Hello")
        Hello
    """
    print(message)


def say_json(payload: object) -> None:
    """Print a JSON document to stdout with two-space indentation.

    Example:
        >>> say_json({"status": "discarded"})
        {
          "status": "discarded"
        }
    """
    print(json.dumps(payload, indent=2))

