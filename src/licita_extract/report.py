"""
Montagem e renderização do relatório de licitação
"""
import re
import logging
from datetime import datetime, timezone
from typing import List, Optional

from markdown_it import MarkdownIt

from .rules import AwardExtractor
from .schema import GroupedAward, NOT_AVAILABLE, TenderReport
from .values import sum_brl_values

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"

METADATA_PATTERNS = {
    'uasg': re.compile(r"UASG\s*(\d+)"),
    'pregao': re.compile(r"PREGÃO\s*(\d+/\d+)"),
    'processo': re.compile(r"Processo\s*n[ºo°]?\s*(\d+)"),
    'responsavel': re.compile(r"HOMOLOGA\s*a\s*adjudicação.*?([A-ZÀ-Ý][A-ZÀ-Ý\s]+),"),
}
DECISION_DATE_PATTERN = re.compile(
    r"Às\s*([\d:]+)\s*horas\s*do\s*dia\s*(\d+)\s*de\s*(\w+)\s*do\s*ano\s*de\s*(\d+)"
)

GROUPED_COLUMNS = [
    "Item", "Grupo", "Descrição", "Quantidade", "Valor Estimado", "Valor Adjudicado",
    "Fornecedor", "CNPJ", "Marca/Fabricante", "Modelo/Versão",
]
INDIVIDUAL_COLUMNS = [c for c in GROUPED_COLUMNS if c != "Grupo"]


def timestamp(moment: Optional[datetime] = None) -> str:
    """Data de geração no formato usado em todas as saídas"""
    moment = moment or datetime.now(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


class TenderReportBuilder:
    """Extrai metadados e propostas e gera o relatório em Markdown"""

    def __init__(self, extractor: Optional[AwardExtractor] = None, tool_name: str = "licita-extract"):
        self.extractor = extractor or AwardExtractor()
        self.tool_name = tool_name
        self.md = MarkdownIt("commonmark").enable("table")

    def build(self, text: str) -> TenderReport:
        """Monta o relatório de um documento a partir do texto"""
        report = TenderReport(
            uasg=self._search(METADATA_PATTERNS['uasg'], text),
            pregao=self._search(METADATA_PATTERNS['pregao'], text),
            processo=self._search(METADATA_PATTERNS['processo'], text),
            data_homologacao=self.extract_decision_date(text),
            responsavel=self._search(METADATA_PATTERNS['responsavel'], text),
            propostas=self.extractor.extract(text),
        )
        report.valor_total = sum_brl_values(p.valor_adjudicado for p in report.propostas)
        logger.info(f"💰 Valor total calculado: R$ {report.valor_total:.2f}")
        return report

    @staticmethod
    def extract_decision_date(text: str) -> str:
        match = DECISION_DATE_PATTERN.search(text)
        if not match:
            return NOT_AVAILABLE
        hora, dia, mes, ano = match.groups()
        return f"Às {hora} horas do dia {dia} de {mes} do ano de {ano}"

    @staticmethod
    def _search(pattern: re.Pattern, text: str) -> str:
        match = pattern.search(text)
        if not match:
            return NOT_AVAILABLE
        return match.group(1).strip()

    def render_markdown(self, report: TenderReport, generated_at: Optional[datetime] = None) -> str:
        """Gera o relatório estruturado em Markdown"""
        lines: List[str] = [
            "---",
            f"gerado_em: {timestamp(generated_at)}",
            f"ferramenta: {self.tool_name}",
            "---",
            "",
            "# RELATÓRIO DE LICITAÇÃO - PROPOSTAS ADJUDICADAS",
            "",
            "## Informações Gerais",
            "",
            f"- **UASG**: {report.uasg}",
            f"- **Pregão**: {report.pregao}",
            f"- **Processo**: {report.processo}",
            f"- **Data de Homologação**: {report.data_homologacao}",
            f"- **Responsável**: {report.responsavel}",
            f"- **Valor Total**: R$ {report.valor_total:.2f}",
            "",
            "## Propostas Adjudicadas",
            "",
        ]
        lines.extend(self._render_table(report))

        lines.extend(["", "## Detalhes das Propostas", ""])
        for proposta in report.propostas:
            grupo_info = f" ({proposta.grupo}) " if isinstance(proposta, GroupedAward) else " "
            lines.extend([
                f"### Item {proposta.item}{grupo_info}- {proposta.descricao}",
                "",
                f"- **Quantidade**: {proposta.quantidade}",
                f"- **Valor Estimado**: R$ {proposta.valor_estimado}",
                f"- **Valor Adjudicado**: R$ {proposta.valor_adjudicado}",
                f"- **Fornecedor**: {proposta.fornecedor}",
                f"- **CNPJ**: {proposta.cnpj}",
                f"- **Melhor Lance**: R$ {proposta.melhor_lance}",
                f"- **Responsável**: {proposta.responsavel}",
                f"- **CPF Responsável**: {proposta.cpf_responsavel}",
                f"- **Marca/Fabricante**: {proposta.marca_fabricante}",
                f"- **Modelo/Versão**: {proposta.modelo_versao}",
                "",
            ])

        lines.extend([
            "## Resumo Estatístico",
            "",
            f"- **Total de Itens Adjudicados**: {len(report.propostas)}",
            f"- **Valor Total das Adjudicações**: R$ {report.valor_total:.2f}",
        ])
        if report.propostas:
            valor_medio = report.valor_total / len(report.propostas)
            lines.append(f"- **Valor Médio por Item**: R$ {valor_medio:.2f}")

        return "\n".join(lines) + "\n"

    def _render_table(self, report: TenderReport) -> List[str]:
        # Um único registro de grupo muda o layout da tabela inteira
        columns = GROUPED_COLUMNS if report.has_groups else INDIVIDUAL_COLUMNS
        rows = [
            "| " + " | ".join(columns) + " |",
            "|" + "|".join("-" * (len(c) + 2) for c in columns) + "|",
        ]

        for proposta in report.propostas:
            cells = [proposta.item]
            if report.has_groups:
                cells.append(proposta.grupo or NOT_AVAILABLE)
            cells.extend([
                proposta.descricao,
                proposta.quantidade,
                f"R$ {proposta.valor_estimado}",
                f"R$ {proposta.valor_adjudicado}",
                proposta.fornecedor,
                proposta.cnpj,
                proposta.marca_fabricante,
                proposta.modelo_versao,
            ])
            rows.append("| " + " | ".join(self._escape_cell(c) for c in cells) + " |")

        return rows

    @staticmethod
    def _escape_cell(value: str) -> str:
        return value.replace("|", "\\|")

    def render_html(self, markdown: str) -> str:
        """Converte o Markdown do relatório em HTML (sem o bloco de cabeçalho)"""
        body = re.sub(r"\A---\n.*?\n---\n", "", markdown, flags=re.DOTALL)
        return self.md.render(body)
