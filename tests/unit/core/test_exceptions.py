"""Tests for onefact.core.exceptions module."""

import pytest

from onefact.core.exceptions import (
    CollectionRunError,
    ContentError,
    ContentValidationError,
    DatabaseError,
    ExternalAPIError,
    FactNotFoundError,
    LLMError,
    OneFactError,
    RecordAlreadyExistsError,
    RecordNotFoundError,
    ServiceError,
    SourceFetchError,
    SourceTimeoutError,
)


@pytest.mark.unit
def test_onefact_error():
    """Test base OneFactError exception."""
    error = OneFactError("Test error")
    assert str(error) == "Test error"
    assert error.context == {}
    assert isinstance(error, Exception)


@pytest.mark.unit
def test_with_context_and_to_dict():
    """Test context chaining and serialization."""
    error = OneFactError("Boom", context={"a": 1}).with_context(b=2)

    assert error.to_dict() == {
        "error_type": "OneFactError",
        "message": "Boom",
        "context": {"a": 1, "b": 2},
    }


@pytest.mark.unit
def test_database_error_operation():
    error = DatabaseError("Insert failed", operation="insert")
    assert error.context["operation"] == "insert"


@pytest.mark.unit
def test_record_not_found_error():
    """Test RecordNotFoundError with model and record_id."""
    error = RecordNotFoundError(model="Fact", record_id="123")

    assert error.model == "Fact"
    assert error.record_id == "123"
    assert "Fact" in str(error)
    assert "123" in str(error)
    assert isinstance(error, DatabaseError)


@pytest.mark.unit
def test_record_already_exists_error():
    """Test RecordAlreadyExistsError with model, field, and value."""
    error = RecordAlreadyExistsError(model="Fact", field="content_hash", value="abc")

    assert error.field == "content_hash"
    assert error.value == "abc"
    assert "already exists" in str(error)
    assert isinstance(error, DatabaseError)


@pytest.mark.unit
def test_source_fetch_error():
    """Test SourceFetchError carries source and HTTP details."""
    error = SourceFetchError("wikipedia", "HTTP 503", status_code=503, endpoint="https://x")

    assert error.source == "wikipedia"
    assert error.status_code == 503
    assert error.context["endpoint"] == "https://x"
    assert "wikipedia" in str(error)
    assert isinstance(error, ExternalAPIError)
    assert isinstance(error, ServiceError)


@pytest.mark.unit
def test_source_timeout_error():
    """Test SourceTimeoutError message and context."""
    error = SourceTimeoutError("nasa_apod", 2.5)

    assert error.timeout == 2.5
    assert error.context["timeout"] == 2.5
    assert "timed out after 2.5s" in str(error)
    assert isinstance(error, SourceFetchError)


@pytest.mark.unit
def test_content_validation_error():
    """Test ContentValidationError keeps validation details."""
    error = ContentValidationError("Too short", validation_errors=["length 10 not in [50, 500]"])

    assert error.validation_errors == ["length 10 not in [50, 500]"]
    assert error.context["content_type"] == "fact"
    assert isinstance(error, ContentError)


@pytest.mark.unit
def test_fact_not_found_error():
    """Test FactNotFoundError default message and filters."""
    error = FactNotFoundError(category="Science")

    assert str(error) == "No fact found"
    assert error.category == "Science"
    assert error.context == {"category": "Science"}
    assert not isinstance(error, DatabaseError)


@pytest.mark.unit
def test_collection_run_error():
    """Test the aggregate collection error."""
    error = CollectionRunError(
        ["source wikipedia: HTTP 503", "store nasa_apod: disk full"],
        source_faults=1,
        store_faults=1,
    )

    assert len(error.faults) == 2
    assert "2 fault(s)" in str(error)
    assert "wikipedia" in str(error)
    assert error.context["source_faults"] == 1


@pytest.mark.unit
def test_llm_error():
    error = LLMError("quota exceeded", model="openai/gpt-4o-mini")
    assert error.model == "openai/gpt-4o-mini"
    assert error.context["service_name"] == "llm"
    assert isinstance(error, ServiceError)
