"""
Test error taxonomy and logging helpers.
"""

import logging

import pytest

from error_handler import (
    ErrorContext, ErrorSeverity, GraphGenerationError, EmptyDataError, OutputError,
    NoTableFound, NoNumericColumn, EmptyExtraction, FetchError, InvalidSourceURL,
    describe_error, log_error_with_context,
)


@pytest.mark.parametrize("error_cls", [
    EmptyDataError, OutputError, NoTableFound, NoNumericColumn, EmptyExtraction,
    FetchError, InvalidSourceURL,
])
def test_errors_share_base(error_cls):
    assert issubclass(error_cls, GraphGenerationError)


def test_describe_error():
    assert describe_error(NoTableFound("No tables found on the page.")) == "No tables found on the page."
    assert describe_error(RuntimeError("boom")) == "Unexpected error: boom"


def test_log_error_with_context(caplog):
    with caplog.at_level(logging.INFO, logger='table_grapher.error_handler'):
        log_error_with_context(OutputError("disk full"), "Saving graph",
                               ErrorSeverity.MEDIUM, {"path": "/tmp/x.png"})
    assert "Saving graph: disk full | Context: {'path': '/tmp/x.png'}" in caplog.text
    assert caplog.records[-1].levelno == logging.WARNING


def test_error_context_reraises(caplog):
    with pytest.raises(FetchError):
        with ErrorContext("Fetching"):
            raise FetchError("HTTP 500")
    assert "Fetching: HTTP 500" in caplog.text


def test_error_context_suppresses():
    with ErrorContext("Optional step", severity=ErrorSeverity.LOW, reraise=False) as ctx:
        raise NoNumericColumn("none")
    assert isinstance(ctx.error, NoNumericColumn)


def test_error_context_has_no_default_return():
    with pytest.raises(TypeError):
        ErrorContext("Optional step", default_return=None)
