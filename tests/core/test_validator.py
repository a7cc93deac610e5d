"""
Unit Tests for Schema Validation

Tests for the snapshot validator module.
"""

import pytest

from inspection_report.core.schemas.validator import (
    validate_snapshot,
    ValidationError,
    SNAPSHOT_SCHEMA_VERSION,
)


class TestValidateSnapshot:
    """Tests for validate_snapshot function."""

    def test_validate_when_complete_snapshot_then_passes(self, sample_snapshot):
        """A well-formed snapshot should not raise."""
        validate_snapshot(sample_snapshot)

    def test_validate_when_legacy_keys_then_passes(self):
        """Legacy Portuguese form keys are accepted."""
        data = {"form": {"secoes": [{"nome_secao": "Pisos", "perguntas": [{"pergunta": "Rodapé"}]}]}}

        validate_snapshot(data)

    def test_validate_when_string_encoded_answers_then_passes(self):
        """Answer blobs may be stored as JSON strings."""
        data = {"form": {"sections": []}, "answers": '{"secao_0_pergunta_0": "Conforme"}'}

        validate_snapshot(data)

    def test_validate_when_form_missing_then_raises(self):
        """Form schema is required."""
        with pytest.raises(ValidationError) as exc_info:
            validate_snapshot({"answers": {}})

        assert "form" in str(exc_info.value)

    def test_validate_when_sections_not_list_then_reports_path(self):
        """Invalid section list should report its path."""
        with pytest.raises(ValidationError) as exc_info:
            validate_snapshot({"form": {"sections": "Pisos"}})

        assert exc_info.value.path == "form.sections"
        assert exc_info.value.errors

    def test_validate_when_not_object_then_raises(self):
        """Top-level arrays are rejected before schema validation."""
        with pytest.raises(ValidationError, match="JSON object"):
            validate_snapshot([])

    def test_validate_when_unknown_version_then_raises(self):
        """Future schema versions are rejected."""
        data = {"schema_version": SNAPSHOT_SCHEMA_VERSION + 1, "form": {"sections": []}}

        with pytest.raises(ValidationError) as exc_info:
            validate_snapshot(data)

        assert exc_info.value.path == "schema_version"

    def test_validate_when_signatures_not_objects_then_raises(self):
        """Signature entries must be objects."""
        data = {"form": {"sections": []}, "metadata": {"signatures": ["Ana"]}}

        with pytest.raises(ValidationError):
            validate_snapshot(data)

    def test_validate_when_form_has_null_entries_then_passes(self):
        """Deleted questions leave null holes that keep later positions."""
        data = {"form": {"sections": [None, {"name": "Pisos", "questions": [{"text": "Rodapé"}, None]}]}}

        validate_snapshot(data)
