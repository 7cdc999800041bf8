"""
Dice Roller - adds a /roll command.

Usage in chat:
    /roll        -> one six-sided die
    /roll 2d20   -> two twenty-sided dice
"""

import re
import random
import logging

from groupme_bot import Plugin

logger = logging.getLogger(__name__)

DICE_PATTERN = re.compile(r'^(\d*)d(\d+)$', re.IGNORECASE)


def parse_dice(spec: str, max_dice: int, max_sides: int) -> tuple[int, int] | None:
    """Parse `NdM` into (count, sides), or None if invalid or too large."""
    match = DICE_PATTERN.match(spec)
    if not match:
        return None

    count = int(match.group(1) or 1)
    sides = int(match.group(2))
    if not 1 <= count <= max_dice or not 2 <= sides <= max_sides:
        return None
    return count, sides


def add_dice(bot, max_dice: int = 10, max_sides: int = 100) -> None:
    """Register /roll on the bot."""

    def roll(message, args):
        count, sides = 1, 6
        if args:
            parsed = parse_dice(args[0], max_dice, max_sides)
            if parsed is None:
                bot.send(f"Usage: /roll [NdM], at most {max_dice}d{max_sides}")
                return
            count, sides = parsed

        rolls = [random.randint(1, sides) for _ in range(count)]
        name = message.get("name", "Someone")
        if count == 1:
            bot.send(f"{name} rolled {rolls[0]}")
        else:
            bot.send(f"{name} rolled {' + '.join(map(str, rolls))} = {sum(rolls)}")

    bot.command("roll", roll, description="Rolls dice, e.g. /roll 2d6.")


def get_plugin() -> Plugin:
    """Factory function called by plugin loader."""
    return Plugin(name="dice", fn=add_dice)
