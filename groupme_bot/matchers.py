"""
Matchers for the GroupMe feature bot.

Turns patterns, command names and random-choice supplies into the
check/respond pair of a Feature.
"""

import re
import random
from typing import Callable, Optional, Sequence, Union

from .models import Message

PatternLike = Union[str, re.Pattern]
Supply = Union[Sequence[str], Callable[[], str]]

PatternRespond = Callable[[Message, list[str]], None]
CommandRespond = Callable[[Message, list[str]], None]

# Characters with a meaning in regular expressions
_SPECIAL_CHARS = re.compile(r'[.?*+^$\[\]\\(){}|\-]')

DEFAULT_SEPARATOR = re.compile(r'\s+')


def quote(literal: str) -> str:
    """Escape a literal string so it can be embedded in a regex."""
    return _SPECIAL_CHARS.sub(lambda m: '\\' + m.group(0), literal)


def compile_pattern(pattern: PatternLike) -> re.Pattern:
    """Strings are matched literally, compiled patterns are used as-is."""
    if isinstance(pattern, str):
        return re.compile(quote(pattern))
    return pattern


def find_all(pattern: re.Pattern, text: str) -> list[str]:
    """Every non-overlapping match of pattern in text, as full-match strings."""
    return [match.group(0) for match in pattern.finditer(text)]


def derive_pattern(
    pattern: PatternLike,
    respond: PatternRespond
) -> tuple[Callable[[Message], bool], Callable[[Message], None]]:
    """
    Build a check/respond pair that fires when the pattern occurs anywhere
    in the message text.

    The responder receives the message and the list of all matches.
    """
    regex = compile_pattern(pattern)

    def check(message: Message) -> bool:
        return regex.search(message.text) is not None

    def handle(message: Message) -> None:
        respond(message, find_all(regex, message.text))

    return check, handle


def command_pattern(name: str) -> re.Pattern:
    """`/name` at the start of the text, followed by whitespace or the end."""
    return re.compile(rf'^/{quote(name)}(\s|$)')


def command_description(name: str, description: Optional[str] = None) -> str:
    if description and description.strip():
        return f"/{name} - {description.strip()}"
    return f"/{name}"


def parse_arguments(
    regex: re.Pattern,
    separator: re.Pattern,
    text: str
) -> list[str]:
    """
    Strip the command token from text and split the rest into arguments.

    Examples:
        "/ban extra text" -> ["extra", "text"]
        "/ban"            -> []
    """
    remainder = regex.sub('', text, count=1).strip()
    if not remainder:
        return []
    return separator.split(remainder)


def derive_command(
    name: str,
    respond: CommandRespond,
    separator: Optional[PatternLike] = None
) -> tuple[re.Pattern, Callable[[Message, list[str]], None]]:
    """
    Build the pattern and pattern-responder for a `/name [args]` command.

    The separator defaults to runs of whitespace. A string separator is
    matched literally.
    """
    regex = command_pattern(name)
    sep = DEFAULT_SEPARATOR if separator is None else compile_pattern(separator)

    def handle(message: Message, matches: list[str]) -> None:
        respond(message, parse_arguments(regex, sep, message.text))

    return regex, handle


def choose(supply: Supply) -> str:
    """Pick a uniformly random candidate, or ask the supplier for one."""
    if callable(supply):
        return supply()
    if not supply:
        raise ValueError("Cannot choose from an empty collection")
    return supply[random.randrange(len(supply))]
