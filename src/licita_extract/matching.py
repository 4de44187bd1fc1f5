"""
Cruzamento de propostas com registros SICAF pelo CNPJ
"""
import re
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .report import timestamp
from .schema import (
    ComparisonEntry, ComparisonReport, ConsolidatedAward, ProposalProjection,
    RegistryRecord, STATUS_FOUND, STATUS_NOT_FOUND,
)
from .storage import write_json

logger = logging.getLogger(__name__)

NON_DIGIT = re.compile(r"\D")


def normalize_cnpj(cnpj: str) -> str:
    """Mantém só os dígitos: "12.345.678/0001-90" -> "12345678000190" """
    return NON_DIGIT.sub("", cnpj or "")


class MatchingEngine:
    """Consulta de CNPJ sobre uma lista de registros SICAF"""

    def __init__(self, registry: Iterable[RegistryRecord]):
        self.registry: List[RegistryRecord] = list(registry)

    def lookup(self, cnpj: str) -> Optional[RegistryRecord]:
        """Primeiro registro (na ordem do SICAF) com o mesmo CNPJ normalizado"""
        target = normalize_cnpj(cnpj)
        if not target:
            return None
        for record in self.registry:
            if normalize_cnpj(record.cnpj) == target:
                return record
        return None

    def exists(self, cnpj: str) -> bool:
        return self.lookup(cnpj) is not None

    def compare(self, propostas: Iterable[ConsolidatedAward]) -> ComparisonReport:
        entries: List[ComparisonEntry] = []

        for proposta in propostas:
            record = self.lookup(proposta.cnpj)
            entries.append(ComparisonEntry(
                cnpj=proposta.cnpj,
                fornecedor=proposta.fornecedor,
                status_sicaf=STATUS_FOUND if record else STATUS_NOT_FOUND,
                dados_sicaf=record,
                proposta=ProposalProjection(
                    item=proposta.item,
                    valor_adjudicado=proposta.valor_adjudicado,
                    uasg=proposta.uasg,
                    pregao=proposta.pregao,
                ),
            ))

        encontrados = sum(1 for e in entries if e.found)
        logger.info(f"📊 Comparação SICAF: {encontrados} encontrados, {len(entries) - encontrados} não encontrados")

        return ComparisonReport(
            data_geracao=timestamp(),
            total_propostas=len(entries),
            sicaf_encontrados=encontrados,
            sicaf_nao_encontrados=len(entries) - encontrados,
            relatorio=entries,
        )


def save_comparison_report(report: ComparisonReport, output_dir: Union[str, Path],
                           file_name: str = "relatorio_sicaf_comparacao.json") -> Path:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    return write_json(out / file_name, report.model_dump(mode="json"))
