# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from unittest.mock import MagicMock, patch

import pytest

from qalter_lib.alter.classifier import ErrorClassifier
from qalter_lib.channel.interface import AttributeRejection
from qalter_lib.core.config import CFG
from qalter_lib.properties.attributes import Attribute, AttributeEdit, OptionLookup


@pytest.fixture
def channel():
    return MagicMock()


@pytest.fixture
def connection():
    return MagicMock()


@pytest.fixture
def classifier(channel):
    return ErrorClassifier(OptionLookup.default(), channel)


def _rejection(name, code=15014, message="Illegal attribute or resource value", resource=None):
    return AttributeRejection(AttributeEdit(name, "value", resource), code, message)


def test_classify_no_errors_returns(classifier, connection, channel):
    classifier.classify(connection, "1.srv", [])

    connection.close.assert_not_called()
    channel.closeSecurity.assert_not_called()


def test_classify_unmapped_attribute_returns(classifier, connection, channel):
    classifier.classify(connection, "1.srv", [_rejection("Variable_List")])

    connection.close.assert_not_called()
    channel.closeSecurity.assert_not_called()


def test_classify_stops_at_first_unmapped_attribute(classifier, connection):
    errors = [_rejection("Variable_List"), _rejection(Attribute.JOB_NAME)]

    classifier.classify(connection, "1.srv", errors)

    connection.close.assert_not_called()


def test_classify_mapped_attribute_exits_with_usage(classifier, connection, channel):
    with (
        patch("qalter_lib.alter.classifier.logger") as mock_logger,
        patch("qalter_lib.alter.classifier.print_usage") as mock_usage,
        pytest.raises(SystemExit) as exc_info,
    ):
        classifier.classify(connection, "1.srv", [_rejection(Attribute.JOB_NAME)])

    assert exc_info.value.code == CFG.exit_codes.usage
    mock_logger.error.assert_called_once_with("illegal -N value")
    mock_usage.assert_called_once()
    connection.close.assert_called_once()
    channel.closeSecurity.assert_called_once()


def test_classify_extended_attribute_reports_w(classifier, connection):
    with (
        patch("qalter_lib.alter.classifier.logger") as mock_logger,
        patch("qalter_lib.alter.classifier.print_usage"),
        pytest.raises(SystemExit),
    ):
        classifier.classify(connection, "1.srv", [_rejection(Attribute.DEPEND)])

    mock_logger.error.assert_called_once_with("illegal -W value")


def test_classify_first_error_decides(classifier, connection):
    errors = [_rejection(Attribute.PRIORITY), _rejection("Variable_List")]

    with (
        patch("qalter_lib.alter.classifier.logger") as mock_logger,
        patch("qalter_lib.alter.classifier.print_usage"),
        pytest.raises(SystemExit),
    ):
        classifier.classify(connection, "1.srv", errors)

    mock_logger.error.assert_called_once_with("illegal -p value")


def test_classify_job_too_large(classifier, connection, channel):
    error = _rejection(
        Attribute.ARRAY_INDICES,
        code=CFG.error_codes.job_too_large,
        message="array too large",
    )

    with (
        patch("qalter_lib.alter.classifier.logger") as mock_logger,
        patch("qalter_lib.alter.classifier.print_usage") as mock_usage,
        pytest.raises(SystemExit) as exc_info,
    ):
        classifier.classify(connection, "1.srv", [error])

    assert exc_info.value.code == CFG.exit_codes.usage
    mock_logger.error.assert_called_once_with("Job array too large")
    mock_usage.assert_not_called()
    connection.close.assert_called_once()
    channel.closeSecurity.assert_called_once()


def test_classify_resource_list_exits_with_server_code(classifier, connection, channel):
    error = _rejection(
        Attribute.RESOURCE_LIST,
        code=15014,
        message="Illegal attribute or resource value",
        resource="walltime",
    )

    with (
        patch("qalter_lib.alter.classifier.logger") as mock_logger,
        patch("qalter_lib.alter.classifier.print_usage") as mock_usage,
        pytest.raises(SystemExit) as exc_info,
    ):
        classifier.classify(connection, "1.srv", [error])

    assert exc_info.value.code == 15014
    mock_logger.error.assert_called_once_with(
        "Illegal attribute or resource value 1.srv"
    )
    mock_usage.assert_not_called()
    connection.close.assert_called_once()
    channel.closeSecurity.assert_called_once()


def test_classify_resource_list_code_truncated_to_zero(classifier, connection):
    error = _rejection(Attribute.RESOURCE_LIST, code=15104, resource="mem")

    with (
        patch("qalter_lib.alter.classifier.logger"),
        pytest.raises(SystemExit) as exc_info,
    ):
        classifier.classify(connection, "1.srv", [error])

    assert exc_info.value.code == CFG.exit_codes.default


def test_classify_resource_list_without_code(classifier, connection):
    error = _rejection(Attribute.RESOURCE_LIST, code=0, resource="mem")

    with (
        patch("qalter_lib.alter.classifier.logger"),
        pytest.raises(SystemExit) as exc_info,
    ):
        classifier.classify(connection, "1.srv", [error])

    assert exc_info.value.code == CFG.exit_codes.default
