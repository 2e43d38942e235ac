"""Unit tests for tablefetch.exceptions module."""
import pytest

from tablefetch.exceptions import (
    ConfigurationError,
    DataError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    NetworkError,
    StorageError,
    TableFetchError,
    ValidationError,
    format_error_for_logging,
)


class TestTableFetchError:

    @pytest.mark.unit
    def test_basic_error(self):
        error = TableFetchError("Test error message")
        assert str(error) == "Test error message"
        assert error.severity == ErrorSeverity.MEDIUM

    @pytest.mark.unit
    def test_context_in_str(self):
        error = TableFetchError(
            "boom", context=ErrorContext(source_name="Books", operation="fetch")
        )
        assert str(error) == "boom [source: Books] [operation: fetch]"

    @pytest.mark.unit
    def test_cause_is_chained(self):
        cause = OSError("disk full")
        error = StorageError("write failed", file_path="a.md", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "disk full"
        assert error.context.file_path == "a.md"


class TestSubclasses:

    @pytest.mark.unit
    def test_network_error_client_status_is_high_severity(self):
        error = NetworkError("unauthorized", status_code=401, url="https://api.airtable.com/v0/")
        assert error.severity == ErrorSeverity.HIGH
        assert error.category == ErrorCategory.NETWORK
        assert error.context.metadata["status_code"] == 401
        assert error.context.url == "https://api.airtable.com/v0/"

    @pytest.mark.unit
    def test_network_error_server_status_is_medium(self):
        assert NetworkError("down", status_code=503).severity == ErrorSeverity.MEDIUM

    @pytest.mark.unit
    def test_validation_error_is_data_error(self):
        error = ValidationError("bad", field_name="batch_size")
        assert isinstance(error, DataError)
        assert error.context.metadata["field_name"] == "batch_size"

    @pytest.mark.unit
    def test_configuration_error(self):
        error = ConfigurationError("missing", config_file="config.yaml")
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.context.file_path == "config.yaml"


class TestFormatErrorForLogging:

    @pytest.mark.unit
    def test_own_error(self):
        data = format_error_for_logging(DataError("bad payload"))
        assert data["error_type"] == "DataError"
        assert data["category"] == "data"

    @pytest.mark.unit
    def test_foreign_error(self):
        data = format_error_for_logging(KeyError("Title"))
        assert data["error_type"] == "KeyError"
