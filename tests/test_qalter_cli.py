# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from qalter_lib.channel.virtual import VirtualChannel, VirtualServerSystem
from qalter_lib.core.config import CFG
from qalter_lib.core.click_format import OPTION_ORDER
from qalter_lib.core.error import QalterError, QalterSecurityError
from qalter_lib.qalter import __version__, build_edits, cli

ILLEGAL = (CFG.error_codes.bad_attribute_value, "Illegal attribute or resource value")


@pytest.fixture
def system(monkeypatch):
    system = VirtualServerSystem()
    system.addServer("alpha")
    system.addServer("beta")
    system.addJob("alpha", "1.alpha", Job_Name="one")
    system.addJob("alpha", "2.alpha", Job_Name="two")

    monkeypatch.setenv(CFG.env_vars.channel, "VIRTUAL")
    VirtualChannel.setSystem(system)
    yield system
    VirtualChannel.setSystem(None)
    VirtualChannel.closeSecurity()


def test_cli_version():
    runner = CliRunner()

    with patch("qalter_lib.qalter.ChannelMeta.obtain") as mock_obtain:
        result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__
    mock_obtain.assert_not_called()


@pytest.mark.parametrize("args", [["--version", "1.alpha"], ["--version", "-N", "x"]])
def test_cli_version_with_other_arguments_prints_usage(args):
    runner = CliRunner()

    with (
        patch("qalter_lib.qalter.ChannelMeta.obtain") as mock_obtain,
        patch("qalter_lib.qalter.print_usage") as mock_usage,
    ):
        result = runner.invoke(cli, args)

    assert result.exit_code == CFG.exit_codes.usage
    assert __version__ not in result.output
    mock_usage.assert_called_once()
    mock_obtain.assert_not_called()


def test_cli_help_shows_synopsis():
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert f"usage: {CFG.binary_name} [-a date_time]" in result.output


def test_cli_without_job_ids_prints_usage():
    runner = CliRunner()

    with (
        patch("qalter_lib.qalter.ChannelMeta.obtain") as mock_obtain,
        patch("qalter_lib.qalter.print_usage") as mock_usage,
    ):
        result = runner.invoke(cli, ["-N", "name"])

    assert result.exit_code == CFG.exit_codes.usage
    mock_usage.assert_called_once()
    mock_obtain.assert_not_called()


def test_cli_invalid_values_do_not_contact_server():
    runner = CliRunner()

    with (
        patch("qalter_lib.qalter.ChannelMeta.obtain") as mock_obtain,
        patch("qalter_lib.qalter.print_usage") as mock_usage,
        patch("qalter_lib.alter.builder.logger") as mock_logger,
    ):
        result = runner.invoke(cli, ["-r", "maybe", "-c", "u", "-N", "ok", "1.alpha"])

    assert result.exit_code == CFG.exit_codes.usage
    assert [c.args[0] for c in mock_logger.error.call_args_list] == [
        "illegal -r value",
        "illegal -c value",
    ]
    mock_usage.assert_called_once()
    mock_obtain.assert_not_called()


def test_cli_unknown_option():
    runner = CliRunner()

    with patch("qalter_lib.qalter.ChannelMeta.obtain") as mock_obtain:
        result = runner.invoke(cli, ["-x", "value", "1.alpha"])

    assert result.exit_code == CFG.exit_codes.usage
    mock_obtain.assert_not_called()


def test_cli_alters_jobs(system):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["-N", "renamed", "-l", "walltime=1:00:00,mem=4gb", "-p", " 10", "1", "2.alpha"],
    )

    assert result.exit_code == 0
    for job_id in ("1.alpha", "2.alpha"):
        job = system.servers["alpha"].jobs[job_id]
        assert job.attributes["Job_Name"] == "renamed"
        assert job.attributes["Priority"] == "10"
        assert job.resources == {"walltime": "1:00:00", "mem": "4gb"}


def test_cli_applies_options_in_command_line_order(system):
    runner = CliRunner()
    result = runner.invoke(cli, ["-W", "Priority=10", "-p", "5", "-N", "a", "-N", "b", "1"])

    assert result.exit_code == 0
    attributes = system.servers["alpha"].jobs["1.alpha"].attributes
    assert attributes["Priority"] == "5"
    assert attributes["Job_Name"] == "b"

    result = runner.invoke(cli, ["-p", "5", "-W", "Priority=10", "1"])

    assert result.exit_code == 0
    assert attributes["Priority"] == "10"


def test_cli_alters_moved_job(system):
    system.moveJob("2.alpha", "alpha", "beta")

    runner = CliRunner()
    result = runner.invoke(cli, ["-W", "depend=afterok:1.alpha", "2"])

    assert result.exit_code == 0
    assert system.servers["beta"].jobs["2.alpha"].attributes["depend"] == "afterok:1.alpha"


def test_cli_unknown_job_exits_with_server_code(system):
    runner = CliRunner()

    with patch("qalter_lib.alter.dispatcher.logger") as mock_logger:
        result = runner.invoke(cli, ["-N", "x", "9", "1"])

    assert result.exit_code == CFG.error_codes.unknown_job_id
    assert str(mock_logger.error.call_args.args[0]) == "Unknown Job Id 9.alpha"
    assert system.servers["alpha"].jobs["1.alpha"].attributes["Job_Name"] == "x"


def test_cli_bad_identifier(system):
    runner = CliRunner()

    with patch("qalter_lib.alter.dispatcher.logger") as mock_logger:
        result = runner.invoke(cli, ["-N", "x", "###bad###"])

    assert result.exit_code == CFG.exit_codes.bad_identifier
    assert str(mock_logger.error.call_args.args[0]) == (
        "illegally formed job identifier: ###bad###"
    )


def test_cli_rejected_option_exits_with_usage(system):
    system.servers["alpha"].rejected["Account_Name"] = ILLEGAL

    runner = CliRunner()
    with (
        patch("qalter_lib.alter.classifier.logger") as mock_logger,
        patch("qalter_lib.alter.classifier.print_usage") as mock_usage,
    ):
        result = runner.invoke(cli, ["-A", "nope", "1", "2"])

    assert result.exit_code == CFG.exit_codes.usage
    mock_logger.error.assert_called_once_with("illegal -A value")
    mock_usage.assert_called_once()
    assert VirtualChannel._security_initialized is False
    assert "Account_Name" not in system.servers["alpha"].jobs["2.alpha"].attributes


def test_cli_rejected_resource_exits_with_server_code(system):
    system.servers["alpha"].rejected["Resource_List.walltime"] = ILLEGAL

    runner = CliRunner()
    with (
        patch("qalter_lib.alter.classifier.logger") as mock_logger,
        patch.object(VirtualChannel, "connect", wraps=VirtualChannel.connect) as mock_connect,
    ):
        result = runner.invoke(cli, ["-l", "walltime=999:00:00", "1", "2"])

    assert result.exit_code == CFG.error_codes.bad_attribute_value
    mock_logger.error.assert_called_once_with(
        "Illegal attribute or resource value 1.alpha"
    )
    mock_connect.assert_called_once_with("alpha")
    assert VirtualChannel._security_initialized is False
    assert "walltime" not in system.servers["alpha"].jobs["2.alpha"].resources


def test_cli_outcome_truncated_to_zero_exits_with_default():
    runner = CliRunner()

    with patch("qalter_lib.qalter.alter_jobs", return_value=15104):
        result = runner.invoke(cli, ["-N", "x", "1.alpha"])

    assert result.exit_code == CFG.exit_codes.default


def test_cli_security_failure(system):
    runner = CliRunner()

    with (
        patch.object(
            VirtualChannel,
            "initSecurity",
            side_effect=QalterSecurityError("unable to initialize security library."),
        ),
        patch("qalter_lib.qalter.logger") as mock_logger,
    ):
        result = runner.invoke(cli, ["-N", "x", "1"])

    assert result.exit_code == CFG.exit_codes.security
    assert str(mock_logger.error.call_args.args[0]) == (
        "unable to initialize security library."
    )
    assert system.servers["alpha"].jobs["1.alpha"].attributes["Job_Name"] == "one"


def test_cli_catches_qalter_error():
    runner = CliRunner()
    error = QalterError("Could not guess a channel.")

    with (
        patch("qalter_lib.qalter.ChannelMeta.obtain", side_effect=error),
        patch("qalter_lib.qalter.logger") as mock_logger,
    ):
        result = runner.invoke(cli, ["-N", "x", "1.alpha"])

    assert result.exit_code == CFG.exit_codes.default
    mock_logger.error.assert_called_once_with(error)


def test_cli_closes_security_when_alteration_fails():
    runner = CliRunner()
    channel = MagicMock()

    with (
        patch("qalter_lib.qalter.ChannelMeta.obtain", return_value=channel),
        patch("qalter_lib.qalter.Dispatcher") as mock_dispatcher,
        patch("qalter_lib.qalter.logger") as mock_logger,
    ):
        mock_dispatcher.return_value.run.side_effect = QalterError("lost connection")
        result = runner.invoke(cli, ["-N", "x", "1.alpha"])

    assert result.exit_code == CFG.exit_codes.default
    channel.initSecurity.assert_called_once()
    channel.closeSecurity.assert_called_once()
    mock_logger.error.assert_called_once()


def test_cli_catches_generic_exception():
    runner = CliRunner()

    with (
        patch("qalter_lib.qalter.ChannelMeta.obtain", side_effect=Exception("boom")),
        patch("qalter_lib.qalter.logger") as mock_logger,
    ):
        result = runner.invoke(cli, ["-N", "x", "1.alpha"])

    assert result.exit_code == CFG.exit_codes.unexpected_error
    mock_logger.critical.assert_called_once()


def test_build_edits_follows_command_line_order():
    builder = build_edits(
        {
            "job_name": ("b", "c"),
            "account": ("a",),
            "project": ("p",),
            "resources": ("mem=1gb",),
        },
        ["job_name", "project", "resources", "job_name", "account"],
    )

    assert [edit.toStr() for edit in builder.edits] == [
        "Job_Name=b",
        "project=p",
        "Resource_List.mem=1gb",
        "Job_Name=c",
        "Account_Name=a",
    ]
    assert builder.errors == 0


def test_build_edits_ignores_non_attribute_parameters():
    builder = build_edits({"priority": ("3",)}, ["version", "priority", "help"])

    assert [edit.toStr() for edit in builder.edits] == ["Priority=3"]


def test_cli_records_option_order():
    ctx = cli.make_context("qalter", ["-N", "a", "-p", "1", "-N", "b", "1.alpha"])

    assert ctx.meta[OPTION_ORDER] == ["job_name", "priority", "job_name"]
    assert ctx.params["job_name"] == ("a", "b")
    assert ctx.params["job_ids"] == ("1.alpha",)


def test_build_edits_empty():
    builder = build_edits({}, [])

    assert builder.edits == ()
    assert builder.errors == 0
