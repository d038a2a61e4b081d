import pytest

from zwallet_shell.commands import do_user_command, get_commands

EXPECTED_COMMANDS = {
    "addresses",
    "balance",
    "clear",
    "decrypt",
    "encrypt",
    "encryptionstatus",
    "export",
    "height",
    "help",
    "import",
    "info",
    "list",
    "lock",
    "new",
    "notes",
    "quit",
    "redeemp2sh",
    "rescan",
    "save",
    "seed",
    "send",
    "sendp2sh",
    "sync",
    "syncstatus",
    "unlock",
}


def test_registry_lists_every_command() -> None:
    assert set(get_commands()) == EXPECTED_COMMANDS


def test_registry_is_rebuilt_and_read_only() -> None:
    first = get_commands()
    second = get_commands()

    assert first is not second
    with pytest.raises(TypeError):
        first["evil"] = first["help"]  # type: ignore[index]


@pytest.mark.parametrize("name", ["addresses", "AddReSSeS", "Addresses", "ADDRESSES"])
def test_dispatch_is_case_insensitive(core, name) -> None:
    assert do_user_command(name, [], core) == do_user_command("addresses", [], core)


def test_every_command_name_resolves_in_upper_case(core) -> None:
    for name in ("help", "height", "balance", "syncstatus", "encryptionstatus"):
        assert do_user_command(name.upper(), [], core) == do_user_command(name, [], core)


def test_unknown_command_echoes_requested_name(core) -> None:
    report = do_user_command("__NonExistent__", [], core)

    assert report == "Unknown command : __NonExistent__. Type 'help' for a list of commands."
    assert core.calls == []


def test_help_without_arguments_lists_commands_sorted(core) -> None:
    report = do_user_command("help", [], core)
    lines = report.splitlines()

    assert lines[0] == "Available commands:"
    names = [line.split(" - ", 1)[0] for line in lines[1:]]
    assert names == sorted(EXPECTED_COMMANDS)
    for line in lines[1:]:
        name, summary = line.split(" - ", 1)
        assert summary.strip(), name


def test_help_with_command_returns_long_help(core) -> None:
    report = do_user_command("help", ["send"], core)

    assert report == get_commands()["send"].help()
    assert "Usage:" in report


def test_help_with_unknown_command(core) -> None:
    assert do_user_command("help", ["bogus"], core) == "Command bogus not found"


def test_help_with_too_many_arguments_returns_own_help(core) -> None:
    assert do_user_command("help", ["send", "balance"], core) == get_commands()["help"].help()


@pytest.mark.parametrize("name", sorted(EXPECTED_COMMANDS))
def test_usage_section_names_the_command(name) -> None:
    command = get_commands()[name]
    lines = command.help().splitlines()

    assert "Usage:" in lines
    usage_lines = lines[lines.index("Usage:") + 1 :]
    assert any(line.split(" ", 1)[0] == name for line in usage_lines)
    assert command.short_help()
