"""
Consolidação das propostas por licitação (UASG + pregão + processo)
"""
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .report import timestamp
from .schema import ConsolidatedAward, TenderGroup
from .storage import write_json
from .values import sum_brl_values

logger = logging.getLogger(__name__)


class Consolidator:
    """Agrupa propostas de vários documentos e grava os JSON consolidados"""

    def __init__(self, summary_file: str = "resumo_geral.json"):
        self.summary_file = summary_file

    def group(self, propostas: Iterable[ConsolidatedAward]) -> List[TenderGroup]:
        """Agrupa pela chave da licitação; grupos em ordem de chave, propostas na ordem de chegada"""
        groups: Dict[Tuple[str, str, str], TenderGroup] = {}

        for proposta in propostas:
            key = proposta.tender_key
            if key not in groups:
                groups[key] = TenderGroup(uasg=proposta.uasg, pregao=proposta.pregao, processo=proposta.processo)
            groups[key].add(proposta)

        result = [groups[key] for key in sorted(groups)]
        for group in result:
            group.finalize()
        return result

    def save(self, groups: List[TenderGroup], output_dir: Union[str, Path],
             total_documentos: Optional[int] = None) -> Path:
        """Grava um licitacao_*.json por grupo e o resumo geral; devolve o caminho do resumo"""
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        data_geracao = timestamp()

        arquivos: List[str] = []
        for group in groups:
            payload = {
                "data_geracao": data_geracao,
                "uasg": group.uasg,
                "pregao": group.pregao,
                "processo": group.processo,
                "total_propostas": group.total_propostas,
                "valor_total": group.valor_total,
                "propostas": [p.model_dump(mode="json") for p in group.propostas],
            }
            write_json(out / group.file_name, payload)
            arquivos.append(group.file_name)
            logger.info(
                f"📄 JSON licitação salvo: {group.file_name} "
                f"({group.total_propostas} propostas, R$ {group.valor_total:.2f})"
            )

        total_propostas = sum(g.total_propostas for g in groups)
        valor_total_geral = sum_brl_values(p.valor_adjudicado for g in groups for p in g.propostas)
        resumo = {
            "data_geracao": data_geracao,
            "total_licitacoes": len(groups),
            "total_documentos": total_documentos,
            "total_propostas": total_propostas,
            "valor_total_geral": valor_total_geral,
            "arquivos_gerados": arquivos,
        }
        resumo_path = write_json(out / self.summary_file, resumo)

        logger.info(
            f"📊 Resumo geral: {len(arquivos)} licitações, {total_propostas} propostas, "
            f"R$ {valor_total_geral:.2f}"
        )
        return resumo_path
