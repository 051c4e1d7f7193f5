"""Tests for error cause classification."""

import json

import pytest

from sqlswitch.errors import (
    GenericCause,
    PlainTextCause,
    ProviderCause,
    SQLAdminError,
    UnclassifiedCause,
    classify_cause,
    describe_cause,
)


class TestClassifyCause:
    def test_provider_error(self):
        cause = classify_cause(SQLAdminError(404, "The Cloud SQL instance does not exist."))
        assert cause == ProviderCause("googleapi", 404, "The Cloud SQL instance does not exist.")

    def test_generic_exception(self):
        assert classify_cause(ValueError("boom")) == GenericCause("boom")

    def test_decode_error_is_generic(self):
        with pytest.raises(json.JSONDecodeError) as exc_info:
            json.loads("{")
        assert isinstance(classify_cause(exc_info.value), GenericCause)

    def test_plain_text(self):
        assert classify_cause("lookup failed") == PlainTextCause("lookup failed")

    def test_empty_text(self):
        assert classify_cause("") == PlainTextCause("")

    @pytest.mark.parametrize(
        "value,rendering",
        [(None, "None"), (42, "42"), ({"a": 1}, "{'a': 1}"), (b"raw", "b'raw'")],
    )
    def test_unclassified(self, value, rendering):
        assert classify_cause(value) == UnclassifiedCause(rendering)


class TestDescribeCause:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (SQLAdminError(403, "Not authorized."), ("googleapi_403", "Not authorized.")),
            (SQLAdminError(409, "Busy."), ("googleapi_409", "Busy.")),
            (RuntimeError("broken pipe"), ("internal_error", "broken pipe")),
            ("plain text", ("internal_error", "plain text")),
            (3.5, ("unknown_error", "3.5")),
        ],
    )
    def test_error_type_and_description(self, value, expected):
        assert describe_cause(classify_cause(value)) == expected

    def test_same_cause_same_result(self):
        error = SQLAdminError(500, "Internal error encountered.")
        assert describe_cause(classify_cause(error)) == describe_cause(classify_cause(error))

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(TypeError):
            describe_cause(object())


class TestSQLAdminError:
    def test_str_includes_code_and_message(self):
        error = SQLAdminError(404, "The Cloud SQL instance does not exist.")
        assert str(error) == "googleapi: Error 404: The Cloud SQL instance does not exist."
        assert error.code == 404
