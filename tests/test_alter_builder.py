# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from datetime import datetime
from unittest.mock import patch

import pytest

from qalter_lib.alter.builder import AttributeBuilder
from qalter_lib.properties.attributes import Attribute, AttributeEdit


@pytest.mark.parametrize(
    "option, argument, expected",
    [
        ("A", "acct", AttributeEdit(Attribute.ACCOUNT_NAME, "acct")),
        ("P", "proj", AttributeEdit(Attribute.PROJECT, "proj")),
        ("e", "/tmp/err", AttributeEdit(Attribute.ERROR_PATH, "/tmp/err")),
        ("o", "/tmp/out", AttributeEdit(Attribute.OUTPUT_PATH, "/tmp/out")),
        ("j", "oe", AttributeEdit(Attribute.JOIN_PATH, "oe")),
        ("k", "oe", AttributeEdit(Attribute.KEEP_FILES, "oe")),
        ("J", "1-10:2", AttributeEdit(Attribute.ARRAY_INDICES, "1-10:2")),
        ("M", "user@host", AttributeEdit(Attribute.MAIL_USERS, "user@host")),
        ("N", " name", AttributeEdit(Attribute.JOB_NAME, " name")),
        ("S", "/bin/bash", AttributeEdit(Attribute.SHELL_PATH_LIST, "/bin/bash")),
        ("u", "user", AttributeEdit(Attribute.USER_LIST, "user")),
        ("m", "  abe", AttributeEdit(Attribute.MAIL_POINTS, "abe")),
        ("p", " 10", AttributeEdit(Attribute.PRIORITY, "10")),
        ("h", " u", AttributeEdit(Attribute.HOLD_TYPES, "u")),
        ("c", " 10", AttributeEdit(Attribute.CHECKPOINT, "10")),
        ("r", "y", AttributeEdit(Attribute.RERUNABLE, "y")),
        ("r", "n", AttributeEdit(Attribute.RERUNABLE, "n")),
    ],
)
def test_builder_add_single_attribute(option, argument, expected):
    builder = AttributeBuilder()

    assert builder.add(option, argument) is True
    assert builder.edits == (expected,)
    assert builder.errors == 0


def test_builder_add_execution_time():
    builder = AttributeBuilder()

    assert builder.add("a", "202607011100") is True

    expected = str(int(datetime(2026, 7, 1, 11, 0).timestamp()))
    assert builder.edits == (AttributeEdit(Attribute.EXECUTION_TIME, expected),)


@pytest.mark.parametrize(
    "option, argument, message",
    [
        ("a", "tomorrow", "illegal -a value"),
        ("c", " u", "illegal -c value"),
        ("r", "yes", "illegal -r value"),
        ("r", "", "illegal -r value"),
        ("W", "   ", "illegal -W value"),
        ("W", "afterok:1.srv", "illegal -W value"),
        ("W", "depend='afterok", "illegal -W value"),
        ("l", ",mem=1gb", "illegal -l value"),
        ("x", "value", "invalid option -- 'x'"),
    ],
)
def test_builder_add_rejected(option, argument, message):
    builder = AttributeBuilder()

    with patch("qalter_lib.alter.builder.logger") as mock_logger:
        assert builder.add(option, argument) is False

    mock_logger.error.assert_called_once_with(message)
    assert builder.edits == ()
    assert builder.errors == 1


def test_builder_add_resources():
    builder = AttributeBuilder()

    assert builder.add("l", "walltime=1:00:00,mem=4gb") is True
    assert builder.edits == (
        AttributeEdit(Attribute.RESOURCE_LIST, "1:00:00", "walltime"),
        AttributeEdit(Attribute.RESOURCE_LIST, "4gb", "mem"),
    )


def test_builder_add_resources_reports_position_of_error():
    builder = AttributeBuilder()

    with (
        patch("qalter_lib.alter.builder.logger") as mock_logger,
        patch("qalter_lib.alter.builder.print_parse_error") as mock_print,
    ):
        assert builder.add("l", "mem=") is False

    assert mock_logger.error.call_args.args[0].startswith("illegal -l value: ")
    mock_print.assert_called_once_with("mem=", 4)
    assert builder.errors == 1


def test_builder_add_resources_generic_error_has_no_position():
    builder = AttributeBuilder()

    with (
        patch("qalter_lib.alter.builder.logger"),
        patch("qalter_lib.alter.builder.print_parse_error") as mock_print,
    ):
        assert builder.add("l", "mem=1gb,") is False

    mock_print.assert_not_called()


def test_builder_add_extended():
    builder = AttributeBuilder()

    assert builder.add("W", " depend=afterok:1.srv,umask=022") is True
    assert builder.edits == (
        AttributeEdit(Attribute.DEPEND, "afterok:1.srv"),
        AttributeEdit(Attribute.UMASK, "022"),
    )


def test_builder_add_extended_passes_unknown_keywords():
    builder = AttributeBuilder()

    assert builder.add("W", "Variable_List=A=1") is True
    assert builder.edits == (AttributeEdit("Variable_List", "A=1"),)


def test_builder_collects_edits_in_order_and_counts_errors():
    builder = AttributeBuilder()

    with patch("qalter_lib.alter.builder.logger"):
        builder.add("N", "first")
        builder.add("r", "maybe")
        builder.add("p", "5")
        builder.add("c", "u")
        builder.add("N", "second")

    assert builder.errors == 2
    assert [edit.toStr() for edit in builder.edits] == [
        "Job_Name=first",
        "Priority=5",
        "Job_Name=second",
    ]


def test_builder_edits_is_a_snapshot():
    builder = AttributeBuilder()
    builder.add("N", "first")
    edits = builder.edits

    builder.add("N", "second")

    assert len(edits) == 1
    assert len(builder.edits) == 2
