import base64
import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import inspection_report
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from inspection_report.core.models import AnswerRecord, Photo, QuestionKind, StatusColor  # noqa: E402


# Common test fixtures
@pytest.fixture
def record_factory():
    """Factory to create AnswerRecords with a given shape."""
    def _create(
        section_index: int = 0,
        question_index: int = 0,
        photos: int = 0,
        comment_length: int = 0,
        question_text: str = "Item",
        section_name: str = None,
        display_text: str = "Conforme",
    ) -> AnswerRecord:
        return AnswerRecord(
            section_index=section_index,
            question_index=question_index,
            section_name=section_name or f"Seção {section_index}",
            question_text=question_text,
            kind=QuestionKind.SELECT,
            display_text=display_text,
            color=StatusColor.GREEN,
            comment="x" * comment_length,
            photos=tuple(
                Photo(url=f"https://fotos/{section_index}-{question_index}-{i}.jpg", caption=f"Foto {i}")
                for i in range(photos)
            ),
        )
    return _create


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def signature_data_uri() -> str:
    """Embedded PNG payload as captured by a signature pad."""
    img = Image.new("RGBA", (120, 40), color=(0, 0, 0, 0))
    for x in range(10, 110):
        img.putpixel((x, 20), (0, 0, 0, 255))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def sample_form() -> dict:
    """Form schema with three sections (the middle one never answered)."""
    return {
        "sections": [
            {
                "name": "Pisos",
                "questions": [
                    {
                        "text": "Rodapé",
                        "kind": "select",
                        "options": [
                            {"text": "Conforme", "color": "green"},
                            {"text": "Não Conforme", "color": "red"},
                        ],
                    },
                    {"text": "Acabamento / Especificação", "kind": "text"},
                    {"text": "Revestimento", "kind": "select", "options": ["Conforme", "Pendente"]},
                ],
            },
            {
                "name": "Esquadrias",
                "questions": [{"text": "Portas", "kind": "select"}],
            },
            {
                "name": "Vistoria",
                "questions": [
                    {"text": "Data", "kind": "date"},
                    {"text": "Itens verificados", "kind": "checkbox"},
                    {"text": "Assinatura do cliente", "kind": "signature"},
                ],
            },
        ]
    }


@pytest.fixture
def sample_snapshot(sample_form, signature_data_uri) -> dict:
    """Complete snapshot document built on sample_form."""
    return {
        "schema_version": 1,
        "form": sample_form,
        "answers": {
            "secao_0_pergunta_0": {"resposta": "Não Conforme", "comentario": "Rodapé solto na sala"},
            "secao_0_pergunta_1": "Porcelanato 60x60",
            "secao_0_pergunta_2": "Pendente",
            "secao_2_pergunta_0": "2024-03-05",
            "secao_2_pergunta_1": {"resposta": "Tomadas extras", "comentario": "Elétrica, Hidráulica"},
            "secao_2_pergunta_2": signature_data_uri,
        },
        "photos": {
            "secao_0_pergunta_0_imagem": [
                {"url": "https://fotos/rodape-1.jpg", "legenda": "Sala"},
                {"url": "https://fotos/rodape-2.jpg", "legenda": "Quarto"},
            ],
        },
        "observations": {"Pisos": "Piso com manchas de rejunte."},
        "metadata": {
            "title": "Relatório de Vistoria - Apto 101",
            "file_name": "vistoria_apto_101.pdf",
            "revision": "R01",
            "inspection_date": "2024-03-05",
            "participants": "Ana Souza, Carlos Lima",
            "signatures": [
                {"party": "Construtora", "name": "Carlos Lima", "image": signature_data_uri},
                {"party": "Cliente", "name": "Ana Souza"},
            ],
            "project_name": "Residencial Jardim",
        },
    }
