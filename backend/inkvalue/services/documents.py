"""
Document Engine — printable PDFs for a saved proposal.

Outputs (A4, studio-branded header):
  - Contract   : service description, agreed price, terms, signature lines
  - Anamnesis  : mandatory health questionnaire and liability statement
  - Aftercare  : healing guide handed to the client

PDFs are rendered in memory and returned as bytes for a streaming response.
"""
import base64
import io
import logging
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas as rl_canvas

from inkvalue.models.schemas import SavedProject, StudioProfile

logger = logging.getLogger("inkvalue-documents")

HEADER_RGB = (0.09, 0.09, 0.11)
BODY_WIDTH = A4[0] - 3 * cm


class DocumentType(str, Enum):
    CONTRACT = "contract"
    ANAMNESIS = "anamnesis"
    AFTERCARE = "aftercare"


TITLES = {
    DocumentType.CONTRACT: "Contrato de Prestação de Serviço",
    DocumentType.ANAMNESIS: "Ficha de Anamnese",
    DocumentType.AFTERCARE: "Cuidados Pós-Tatuagem",
}


def format_money(value: float) -> str:
    """pt-BR currency: 1234.5 -> 'R$ 1.234,50'."""
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"


# ── PDF helpers ───────────────────────────────────────────────────────────────

def logo_image(logo_url: str) -> Optional[ImageReader]:
    """Decode a `data:image/...;base64,` logo; other values (remote URLs) are not fetched."""
    if not logo_url.startswith("data:image/") or ";base64," not in logo_url:
        return None
    try:
        raw = base64.b64decode(logo_url.split(",", 1)[1], validate=True)
        return ImageReader(io.BytesIO(raw))
    except Exception as e:
        logger.warning(f"Studio logo ignored ({type(e).__name__}: {e})")
        return None


def _draw_header(c, page_w, page_h, studio: StudioProfile):
    c.setFillColorRGB(*HEADER_RGB)
    c.rect(0, page_h - 3*cm, page_w, 3*cm, fill=1, stroke=0)

    text_x = 1.5*cm
    logo = logo_image(studio.logo_url)
    if logo is not None:
        c.drawImage(
            logo, 1.5*cm, page_h - 2.75*cm, width=2.5*cm, height=2.5*cm,
            preserveAspectRatio=True, anchor="w", mask="auto",
        )
        text_x = 4.5*cm

    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 14)
    c.drawString(text_x, page_h - 1.4*cm, studio.name.upper())
    c.setFont("Helvetica", 8)
    c.drawString(text_x, page_h - 2.0*cm, f"{studio.address}  •  {studio.phone}")
    c.drawString(text_x, page_h - 2.5*cm, f"{studio.email}  •  CNPJ/CPF: {studio.document}")
    c.setFillColorRGB(0, 0, 0)


def _draw_footer(c, page_w, generated_on: str):
    c.setFillColorRGB(0.5, 0.5, 0.5)
    c.setFont("Helvetica", 7)
    c.drawCentredString(page_w / 2, 0.8*cm, f"Documento gerado em {generated_on}")
    c.setStrokeColorRGB(0.7, 0.7, 0.7)
    c.line(1.5*cm, 1.2*cm, page_w - 1.5*cm, 1.2*cm)
    c.setFillColorRGB(0, 0, 0)


class _Writer:
    """Top-down cursor over a canvas page; wraps paragraphs to the body width."""

    def __init__(self, c, top: float):
        self.c = c
        self.y = top

    def heading(self, text: str):
        self.y -= 0.4*cm
        self.c.setFont("Helvetica-Bold", 11)
        self.c.drawString(1.5*cm, self.y, text.upper())
        self.y -= 0.6*cm

    def paragraph(self, text: str, font: str = "Helvetica", size: float = 9.5):
        self.c.setFont(font, size)
        for line in simpleSplit(text, font, size, BODY_WIDTH):
            self.c.drawString(1.5*cm, self.y, line)
            self.y -= size * 1.45
        self.y -= 0.15*cm

    def field(self, label: str, value: str):
        self.c.setFont("Helvetica-Bold", 9.5)
        self.c.drawString(1.5*cm, self.y, label)
        self.c.setFont("Helvetica", 9.5)
        self.c.drawString(5.5*cm, self.y, value)
        self.y -= 0.55*cm


# ── Section bodies ────────────────────────────────────────────────────────────

def _contract_body(w: _Writer, proposal: SavedProject, studio: StudioProfile):
    w.paragraph(
        f"Pelo presente instrumento particular, de um lado {studio.owner_name}, doravante "
        f"denominado TATUADOR(A), e de outro lado {proposal.client_name}, doravante "
        "denominado CLIENTE."
    )
    w.heading("1. Do Serviço Contratado")
    w.field("Estilo:", proposal.style.value)
    w.field("Local do Corpo:", proposal.body_part)
    w.field("Dimensões:", f"{proposal.width_cm:g}cm x {proposal.height_cm:g}cm")
    w.field("Sessões Estimadas:", str(proposal.sessions))
    w.heading("2. Do Investimento")
    w.paragraph(
        "O valor total acordado para a realização do projeto é de "
        f"{format_money(proposal.final_price)}."
    )
    w.heading("3. Termos e Condições")
    w.paragraph(
        "O CLIENTE declara estar ciente de que a tatuagem é um processo irreversível e que o "
        "resultado final depende também dos cuidados pós-procedimento."
    )
    w.paragraph(
        "O CLIENTE autoriza o uso de imagem da tatuagem realizada para fins de portfólio e "
        "divulgação do TATUADOR(A)."
    )


ANAMNESIS_ITEMS = [
    "( ) Diabetes     ( ) Hipertensão     ( ) Hemofilia",
    "( ) Hepatite     ( ) HIV+     ( ) Epilepsia",
    "( ) Problemas Cardíacos     ( ) Uso de Anticoagulantes",
    "( ) Alergias (tintas, látex, medicamentos): _______________________",
    "( ) Doenças de Pele (Psoríase, Vitiligo): _______________________",
    "( ) Está grávida ou amamentando? _______________________",
]


def _anamnesis_body(w: _Writer, proposal: SavedProject, studio: StudioProfile, today: str):
    w.field("Cliente:", proposal.client_name)
    w.field("Data:", today)
    w.heading("Questionário de Saúde Obrigatório")
    w.paragraph("Para sua segurança, responda com sinceridade:")
    for item in ANAMNESIS_ITEMS:
        w.paragraph(item)
    w.heading("Termo de Responsabilidade")
    w.paragraph(
        "Declaro que as informações acima são verdadeiras. Isento o profissional de "
        "responsabilidades decorrentes de informações omitidas sobre minha saúde."
    )


AFTERCARE_SECTIONS = [
    ("Limpeza", [
        "Lave o local 3x ao dia com sabonete neutro e água fria/morna. Não use buchas. "
        "Seque com papel toalha (não esfregue).",
    ]),
    ("Hidratação", [
        "Após lavar, aplique uma camada fina da pomada recomendada. O excesso de pomada "
        "prejudica a cicatrização.",
    ]),
    ("Proibições (30 Dias)", [
        "• Não tomar sol na região.",
        "• Não entrar em mar, piscina, sauna ou banheira.",
        "• Não coçar ou arrancar as casquinhas.",
        "• Evitar alimentos remosos (porco, frutos do mar, chocolate, ovo).",
    ]),
]


def _aftercare_body(w: _Writer):
    w.paragraph(
        "A qualidade da sua tatuagem depende 50% do tatuador e 50% da sua cicatrização. "
        "Siga rigorosamente:"
    )
    for title, lines in AFTERCARE_SECTIONS:
        w.heading(title)
        for line in lines:
            w.paragraph(line)


def _draw_signatures(c, page_w, studio: StudioProfile, client_name: str):
    y = 4*cm
    half = page_w / 2
    c.setStrokeColorRGB(0, 0, 0)
    for x0, name, role in (
        (1.5*cm, studio.owner_name, "Tatuador(a)"),
        (half + 0.5*cm, client_name, "Cliente"),
    ):
        x1 = x0 + half - 2*cm
        c.line(x0, y, x1, y)
        c.setFont("Helvetica-Bold", 9)
        c.drawCentredString((x0 + x1) / 2, y - 0.45*cm, name)
        c.setFont("Helvetica", 8)
        c.drawCentredString((x0 + x1) / 2, y - 0.85*cm, role)


# ── Entry point ───────────────────────────────────────────────────────────────

def render_document(
    kind: DocumentType,
    proposal: SavedProject,
    studio: StudioProfile,
    today: Optional[Callable[[], datetime]] = None,
) -> bytes:
    """Render one document for a saved proposal and return the PDF bytes."""
    kind = DocumentType(kind)
    now = (today or datetime.now)()
    date_text = now.strftime("%d/%m/%Y")

    buffer = io.BytesIO()
    page_w, page_h = A4
    c = rl_canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"{TITLES[kind]} - {proposal.client_name}")
    c.setAuthor(studio.name)

    _draw_header(c, page_w, page_h, studio)
    _draw_footer(c, page_w, date_text)

    c.setFont("Helvetica-Bold", 16)
    c.drawCentredString(page_w / 2, page_h - 4.3*cm, TITLES[kind].upper())
    w = _Writer(c, page_h - 5.4*cm)

    if kind == DocumentType.CONTRACT:
        _contract_body(w, proposal, studio)
    elif kind == DocumentType.ANAMNESIS:
        _anamnesis_body(w, proposal, studio, date_text)
    else:
        _aftercare_body(w)

    _draw_signatures(c, page_w, studio, proposal.client_name)
    c.showPage()
    c.save()

    logger.info("Rendered %s", kind.value, extra={"proposal_id": proposal.id})
    return buffer.getvalue()
