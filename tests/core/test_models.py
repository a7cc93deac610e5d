"""
Unit tests for core models: answers, form schema and report metadata.
"""

import pytest

import inspection_report
from inspection_report.core.models import (
    AnswerRecord,
    ChoiceOption,
    FormSchema,
    Photo,
    QuestionKind,
    ReportMetadata,
    SectionDescriptor,
    Signature,
    StatusColor,
)
from inspection_report.core.utils import to_roman


class TestStatusColor:
    """Tests for StatusColor parsing."""

    def test_parse_when_known_tag_then_returns_color(self):
        assert StatusColor.parse(" Red ") is StatusColor.RED

    def test_parse_when_unknown_tag_then_returns_gray(self):
        assert StatusColor.parse("magenta") is StatusColor.GRAY


class TestQuestionKind:
    """Tests for QuestionKind parsing."""

    def test_parse_when_unknown_kind_then_treated_as_text(self):
        assert QuestionKind.parse("slider") is QuestionKind.TEXT

    def test_str_when_called_then_returns_value(self):
        assert str(QuestionKind.CHECKBOX) == "checkbox"


class TestAnswerRecord:
    """Tests for AnswerRecord content rules."""

    def test_key_when_created_then_uses_schema_position(self):
        record = AnswerRecord(2, 5, "Pisos", "Rodapé", QuestionKind.TEXT, "ok")

        assert record.key == "2-5"

    def test_has_content_when_only_dash_then_false(self):
        """A lone "-" is a placeholder, not a response or comment."""
        record = AnswerRecord(0, 0, "S", "Q", QuestionKind.TEXT, display_text="-", comment=" - ")

        assert not record.has_content

    def test_has_content_when_only_photo_then_true(self):
        record = AnswerRecord(0, 0, "S", "Q", QuestionKind.PHOTO, photos=(Photo("a.jpg"),))

        assert record.has_content
        assert record.photo_count == 1

    def test_has_content_when_only_signature_then_true(self):
        record = AnswerRecord(0, 0, "S", "Q", QuestionKind.SIGNATURE, signature_image="data:image/png;base64,AA")

        assert record.has_content


class TestSectionDescriptor:
    """Tests for SectionDescriptor."""

    def test_has_observation_when_blank_then_false(self):
        assert not SectionDescriptor(0, "Pisos", 1, observation="   ").has_observation

    def test_has_observation_when_text_then_true(self):
        assert SectionDescriptor(0, "Pisos", 1, observation="Manchas").has_observation


class TestFormSchema:
    """Tests for FormSchema parsing."""

    def test_from_dict_when_english_keys_then_parses(self, sample_form):
        form = FormSchema.from_dict(sample_form)

        assert len(form.sections) == 3
        assert form.sections[0].name == "Pisos"
        assert form.sections[0].questions[0].kind is QuestionKind.SELECT
        assert form.question_count == 7

    def test_from_dict_when_legacy_keys_then_parses(self):
        data = {
            "secoes": [{
                "nome_secao": "Pisos",
                "perguntas": [{"pergunta": "Rodapé", "tipo": "select",
                               "opcoes": [{"texto": "Conforme", "cor": "green"}]}],
            }]
        }

        form = FormSchema.from_dict(data)

        question = form.sections[0].questions[0]
        assert question.text == "Rodapé"
        assert question.options == (ChoiceOption("Conforme", StatusColor.GREEN),)

    def test_from_dict_when_bare_string_options_then_color_unresolved(self, sample_form):
        """Legacy bare-string options carry no color of their own."""
        form = FormSchema.from_dict(sample_form)

        option = form.sections[0].questions[2].find_option("Pendente")

        assert option is not None
        assert option.color is None

    @pytest.mark.parametrize("data", [None, [], {"sections": "x"}])
    def test_from_dict_when_malformed_then_empty(self, data):
        assert FormSchema.from_dict(data).is_empty

    def test_from_dict_when_entry_not_object_then_position_kept(self):
        data = {"sections": [
            None,
            {"name": "Pisos", "questions": [{"text": "Rodapé"}, None, {"text": "Porta"}]},
        ]}

        form = FormSchema.from_dict(data)

        assert [s.present for s in form.sections] == [False, True]
        questions = form.sections[1].questions
        assert [q.text for q in questions] == ["Rodapé", "", "Porta"]
        assert not questions[1].present
        assert form.question_count == 2

    def test_from_dict_when_only_holes_then_empty(self):
        assert FormSchema.from_dict({"sections": [None, 3]}).is_empty


class TestReportMetadata:
    """Tests for ReportMetadata parsing."""

    def test_from_dict_when_participants_string_then_split(self):
        meta = ReportMetadata.from_dict({"participants": "Ana, Carlos , "})

        assert meta.participants == ("Ana", "Carlos")

    def test_from_dict_when_legacy_signature_keys_then_parses(self):
        meta = ReportMetadata.from_dict({
            "signatures": [{"parte": "Cliente", "nome": "Ana", "assinatura_imagem": "data:image/png;base64,AA"}],
        })

        assert meta.signatures == (Signature("Cliente", "Ana", "data:image/png;base64,AA"),)
        assert meta.has_signatures

    def test_from_dict_when_none_then_defaults(self):
        meta = ReportMetadata.from_dict(None)

        assert meta.title == ""
        assert not meta.has_signatures


class TestToRoman:
    """Tests for Roman numeral formatting."""

    @pytest.mark.parametrize("number,expected", [
        (1, "I"), (4, "IV"), (9, "IX"), (14, "XIV"), (40, "XL"), (1994, "MCMXCIV"),
    ])
    def test_to_roman_when_positive_then_formats(self, number, expected):
        assert to_roman(number) == expected

    def test_to_roman_when_zero_then_empty(self):
        assert to_roman(0) == ""


class TestPackageMetadata:
    """Tests for the package-level attributes."""

    def test_package_when_imported_then_version_and_copyright(self):
        assert inspection_report.__version__ == "0.1.0"
        assert inspection_report.__copyright__.startswith("Copyright")
