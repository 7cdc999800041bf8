"""
Magic 8-Ball - answers /8ball questions with a random verdict.
"""

from groupme_bot import Plugin

ANSWERS = [
    "It is certain.",
    "Without a doubt.",
    "Most likely.",
    "Ask again later.",
    "Cannot predict now.",
    "Don't count on it.",
    "My sources say no.",
    "Very doubtful.",
]


def add_eightball(bot, answers: list[str] | None = None) -> None:
    bot.random("8ball", answers or ANSWERS, description="Answers a yes/no question.")


def get_plugin() -> Plugin:
    """Factory function called by plugin loader."""
    return Plugin(name="eightball", fn=add_eightball)
