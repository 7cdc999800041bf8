from __future__ import annotations

import logging
import re
from pathlib import Path

import pytest

from groupme_bot import Bot, ConfigurationError, DuplicatePluginError, Plugin, PluginLoader

from fakes import FakeSender, user_message


def _write_plugin(root: Path, folder: str, source: str) -> None:
    (root / folder).mkdir(parents=True)
    (root / folder / "plugin.py").write_text(source)


def test_discovers_bundled_plugins() -> None:
    plugins = PluginLoader().load_all_plugins()

    assert set(plugins) == {"dice", "eightball"}
    assert all(isinstance(p, Plugin) for p in plugins.values())


def test_allow_list_limits_plugins() -> None:
    plugins = PluginLoader(allowed_plugins=["dice"]).load_all_plugins()

    assert list(plugins) == ["dice"]


def test_broken_plugins_are_skipped(tmp_path: Path) -> None:
    _write_plugin(tmp_path, "good", (
        "from groupme_bot import Plugin\n"
        "def get_plugin():\n"
        "    return Plugin(name='good', fn=lambda bot: None)\n"
    ))
    _write_plugin(tmp_path, "raises", "raise ImportError('missing dependency')\n")
    _write_plugin(tmp_path, "wrong_type", "def get_plugin():\n    return 'nope'\n")
    _write_plugin(tmp_path, "no_factory", "NAME = 'nothing'\n")
    (tmp_path / "empty").mkdir()
    (tmp_path / "__pycache__").mkdir()

    loader = PluginLoader(root_dir=tmp_path)

    assert loader.discover_plugins() == ["good", "no_factory", "raises", "wrong_type"]
    assert list(loader.load_all_plugins()) == ["good"]


def test_missing_plugin_directory(tmp_path: Path) -> None:
    assert PluginLoader(root_dir=tmp_path / "absent").load_all_plugins() == {}


def test_dice_plugin_rolls() -> None:
    sender = FakeSender()
    bot = Bot(bot_id="test-bot", sender=sender)
    bot.use(*PluginLoader(allowed_plugins=["dice"]).load_all_plugins().values())
    bot.dice()

    bot.dispatch(user_message("/roll"))
    bot.dispatch(user_message("/roll 3d6"))
    bot.dispatch(user_message("/roll 500d6"))

    single, triple, usage = sender.texts
    assert re.fullmatch(r"Alice rolled [1-6]", single)
    match = re.fullmatch(r"Alice rolled ([1-6]) \+ ([1-6]) \+ ([1-6]) = (\d+)", triple)
    assert match
    assert sum(int(match.group(i)) for i in range(1, 4)) == int(match.group(4))
    assert usage.startswith("Usage: /roll")


def test_eightball_plugin_answers() -> None:
    sender = FakeSender()
    bot = Bot(bot_id="test-bot", sender=sender)
    bot.use(*PluginLoader(allowed_plugins=["eightball"]).load_all_plugins().values())
    bot.eightball(["Yes.", "No."])

    bot.dispatch(user_message("/8ball will it rain?"))

    assert sender.texts[0] in {"Yes.", "No."}
    assert bot.registry.descriptions() == ["/8ball - Answers a yes/no question."]


def _greet_source(plugin_name: str) -> str:
    return (
        "from groupme_bot import Plugin\n"
        "def get_plugin():\n"
        f"    return Plugin(name={plugin_name!r}, fn=lambda bot, word='hi': bot.pattern(word, lambda m, matches: bot.send(word)))\n"
    )


def test_two_folders_with_same_plugin_name_fail(tmp_path: Path) -> None:
    _write_plugin(tmp_path, "a_greet", _greet_source("greet"))
    _write_plugin(tmp_path, "b_greet", _greet_source("greet"))

    with pytest.raises(ConfigurationError) as exc_info:
        PluginLoader(root_dir=tmp_path).load_all_plugins()

    assert isinstance(exc_info.value, DuplicatePluginError)
    assert exc_info.value.plugin_name == "greet"


def test_duplicate_plugin_names_abort_install(tmp_path: Path) -> None:
    _write_plugin(tmp_path, "a_greet", _greet_source("greet"))
    _write_plugin(tmp_path, "b_greet", _greet_source("greet"))
    bot = Bot(bot_id="test-bot", sender=FakeSender())

    with pytest.raises(DuplicatePluginError):
        PluginLoader(root_dir=tmp_path).install(bot)

    assert dict(bot.plugins) == {}
    assert len(bot.registry) == 0


def test_folder_name_mismatch_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write_plugin(tmp_path, "greetings", _greet_source("greet"))

    with caplog.at_level(logging.WARNING, logger="groupme_bot.plugin_loader"):
        plugins = PluginLoader(root_dir=tmp_path).load_all_plugins()

    assert list(plugins) == ["greet"]
    assert "provides plugin 'greet'" in caplog.text


def test_failing_factory_is_skipped(tmp_path: Path) -> None:
    _write_plugin(tmp_path, "boom", "def get_plugin():\n    raise RuntimeError('boom')\n")

    assert PluginLoader(root_dir=tmp_path).load_all_plugins() == {}


def test_missing_allowed_plugin_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write_plugin(tmp_path, "greet", _greet_source("greet"))

    with caplog.at_level(logging.WARNING, logger="groupme_bot.plugin_loader"):
        plugins = PluginLoader(root_dir=tmp_path, allowed_plugins=["greet", "weather"]).load_all_plugins()

    assert list(plugins) == ["greet"]
    assert "'weather' was not loaded" in caplog.text


def test_install_passes_configured_arguments(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write_plugin(tmp_path, "greet", _greet_source("greet"))
    sender = FakeSender()
    bot = Bot(bot_id="test-bot", sender=sender)

    with caplog.at_level(logging.WARNING, logger="groupme_bot.plugin_loader"):
        installed = PluginLoader(root_dir=tmp_path).install(
            bot, {"greet": ["howdy"], "weather": ["Boston"]}
        )

    assert list(installed) == ["greet"]
    assert "unknown plugin 'weather'" in caplog.text

    bot.dispatch(user_message("well howdy there"))
    bot.dispatch(user_message("hi"))

    assert sender.texts == ["howdy"]
