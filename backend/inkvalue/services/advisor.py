"""
Advisor — best-effort generative text built on top of a computed price.

  - analyze_pricing()      : sustainability analysis + 3 practical tips (JSON)
  - generate_sales_pitch() : WhatsApp proposal message for the client

Inputs are read-only copies; nothing produced here feeds back into pricing or
the proposal lifecycle. Any failure (no key, provider error, malformed JSON)
returns static fallback content instead of raising.
"""
import json
import logging
from typing import Optional

from inkvalue.models.schemas import AIAnalysisResult, CostProfile, PricingBreakdown, Project
from inkvalue.services import llm_client

logger = logging.getLogger("inkvalue-advisor")

FALLBACK_ANALYSIS = AIAnalysisResult(
    analysis=(
        "Não foi possível conectar à IA para análise no momento. "
        "Verifique sua chave de API."
    ),
    tips=[
        "Revise seus custos fixos manualmente.",
        "Compare com a concorrência local.",
        "Garanta que o tempo de desenho seja cobrado.",
    ],
    is_sustainable=True,
    fallback=True,
)

FALLBACK_PITCH = "Não foi possível gerar a proposta no momento."


def _money(value: float) -> str:
    return f"R$ {value:.2f}"


def build_analysis_prompt(project: Project, costs: CostProfile, pricing: PricingBreakdown) -> str:
    total_hours = project.design_time_hours + project.tattoo_time_hours
    return (
        "Analise os seguintes dados de precificação de um projeto de tatuagem:\n\n"
        "CONTEXTO DO ESTÚDIO:\n"
        f"- Custos Fixos Mensais: {_money(costs.total_monthly_fixed_expenses)}\n"
        f"- Custo Fixo por Hora (Calculado): {_money(pricing.overhead_per_hour)}\n\n"
        "DETALHES DO PROJETO:\n"
        f"- Estilo: {project.style.value}\n"
        f"- Complexidade: {project.complexity.value}\n"
        f"- Parte do Corpo: {project.body_part}\n"
        f"- Dimensões: {project.width_cm:g}cm (L) x {project.height_cm:g}cm (A)\n"
        f"- Tempo Total (Design + Tattoo): {total_hours:g} horas\n"
        f"- Custo Materiais: {_money(project.material_cost)}\n\n"
        "RESULTADO FINANCEIRO:\n"
        f"- Custo Base Total: {_money(pricing.total_base_cost)}\n"
        f"- Preço Sugerido (Venda): {_money(pricing.suggested_price)}\n"
        f"- Lucro Líquido: {_money(pricing.profit_amount)}\n"
        f"- Margem Aplicada: {project.profit_margin_percent:g}%\n\n"
        "Retorne um JSON com as chaves:\n"
        '  "analysis": análise curta (máximo 2 parágrafos) sobre se o preço é sustentável e competitivo,\n'
        '  "tips": lista com 3 dicas práticas para melhorar a lucratividade ou vender esse valor,\n'
        '  "isSustainable": booleano indicando se o negócio parece sustentável.'
    )


def build_pitch_prompt(project: Project, price: float, client_name: Optional[str]) -> str:
    greeting = client_name or "Cliente"
    return (
        "Escreva uma proposta comercial persuasiva para um cliente de tatuagem (mensagem para WhatsApp).\n\n"
        "DADOS:\n"
        f"- Cliente: {client_name or 'o cliente'}\n"
        f"- Tatuagem: {project.style.value}, {project.body_part}\n"
        f"- Tamanho: {project.width_cm:g}cm x {project.height_cm:g}cm\n"
        f"- Valor do Orçamento: {_money(price)}\n"
        "- Diferenciais: Tatuagem exclusiva, materiais de alta qualidade, biossegurança.\n\n"
        "Crie um texto curto justificando o valor e criando desejo, com gatilhos de exclusividade "
        f"e escassez de agenda. Comece saudando o cliente pelo NOME ({greeting})."
    )


def _parse_analysis(raw: str) -> AIAnalysisResult:
    # Some models wrap JSON in markdown fences; keep the outermost object
    start, end = raw.find("{"), raw.rfind("}")
    if start != -1 and end > start:
        raw = raw[start:end + 1]
    return AIAnalysisResult.model_validate(json.loads(raw))


async def analyze_pricing(
    project: Project, costs: CostProfile, pricing: PricingBreakdown
) -> AIAnalysisResult:
    if not llm_client.llm_configured():
        logger.info("No LLM provider key configured — returning static analysis")
        return FALLBACK_ANALYSIS

    messages = [
        {"role": "system", "content": llm_client.get_system_prompt("consultant")},
        {"role": "user", "content": build_analysis_prompt(project, costs, pricing)},
    ]
    try:
        raw = await llm_client.complete(messages, temperature=0.4, json_mode=True)
        return _parse_analysis(raw or "")
    except Exception as e:
        logger.warning(f"Pricing analysis unavailable ({type(e).__name__}: {e})")
        return FALLBACK_ANALYSIS


async def generate_sales_pitch(project: Project, price: float, client_name: Optional[str]) -> str:
    if not llm_client.llm_configured():
        logger.info("No LLM provider key configured — returning static pitch")
        return FALLBACK_PITCH

    messages = [
        {"role": "system", "content": llm_client.get_system_prompt("copywriter")},
        {"role": "user", "content": build_pitch_prompt(project, price, client_name)},
    ]
    try:
        text = await llm_client.complete(messages)
    except Exception as e:
        logger.warning(f"Sales pitch unavailable ({type(e).__name__}: {e})")
        return FALLBACK_PITCH
    return text or FALLBACK_PITCH
