"""
Regras (expressões regulares) para extração de propostas adjudicadas
"""
import re
import bisect
import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple, Union

from .schema import GroupedAward, IndividualAward, NOT_AVAILABLE

logger = logging.getLogger(__name__)

Award = Union[IndividualAward, GroupedAward]

# Lacuna que não atravessa o cabeçalho do próximo item de grupo
_GROUP_GAP = r"(?:(?!Item\s+\d+\s+do\s+Grupo)[\s\S])*?"

# Formato de grupo: um único padrão cobre item, grupo, quantidade, valor e adjudicação
GROUPED_PATTERN = re.compile(
    r"Item\s+(?P<item>\d+)\s+do\s+Grupo\s+G(?P<grupo>\d+)\s*-\s*(?P<descricao>[^\n]+)"
    + _GROUP_GAP + r"Quantidade:\s*(?P<quantidade>\d[\d\.]*)"
    + _GROUP_GAP + r"Valor\s+estimado:\s*R\$\s*(?P<valor>[\d,\.]+)"
    + _GROUP_GAP + r"Situação:\s*(?P<situacao>Adjudicado e Homologado)"
    + _GROUP_GAP + r"Adjudicado e Homologado por\s+(?P<responsavel>CPF[^,]+?)\s*,?\s*para\s+"
    r"(?P<fornecedor>[^,]+),\s*CNPJ\s*(?P<cnpj>[\d\.\-/]+),\s*"
    r"melhor\s+lance:\s*R\$\s*(?P<melhor_lance>[\d,\.]+)"
)

_AWARD_SENTENCE = (
    r"{verb} e Homologado por CPF\s*(?P<cpf>[\d\.\-\*]+)\s*-\s*(?P<responsavel>[^,]+),?\s*"
    r"para\s+(?P<fornecedor>[^,]+),\s*CNPJ\s*(?P<cnpj>[\d\.\-/]+),\s*"
    r"melhor\s+lance:\s*R\$\s*(?P<melhor_lance>[\d,\.]+)"
)
_NEGOTIATED = r".*?valor\s+negociado:\s*R\$\s*(?P<valor_negociado>[\d,\.]+)"

# Ordem fixa: com valor negociado antes, e as duas grafias ("Adjucado" aparece nos documentos)
INDIVIDUAL_PATTERNS: List[Tuple[re.Pattern, bool]] = [
    (re.compile(_AWARD_SENTENCE.format(verb="Adjucado") + _NEGOTIATED), True),
    (re.compile(_AWARD_SENTENCE.format(verb="Adjudicado") + _NEGOTIATED), True),
    (re.compile(_AWARD_SENTENCE.format(verb="Adjucado")), False),
    (re.compile(_AWARD_SENTENCE.format(verb="Adjudicado")), False),
]

# Cabeçalho de item no início da linha ("Propostas do Item 1" não delimita trecho)
ITEM_HEADING = re.compile(r"^[ \t]*Item[ \t]+(?P<item>\d+)(?P<resto>[^\n]*)", re.MULTILINE)

MASKED_CPF = re.compile(r"[\d\*]{3}\.[\d\*]{3}\.[\d\*]{3}-[\d\*]{2}")
CPF_PREFIX = re.compile(r"^CPF\s*[\d\.\-\*]+\s*-\s*")

QUANTITY_PATTERNS = [
    re.compile(r"Quantidade:\s*(\d[\d\.]*)"),
    re.compile(r"Unidade\s+(\d+)"),
]
ESTIMATED_VALUE_PATTERNS = [
    re.compile(r"Valor\s+estimado:\s*R\$\s*([\d,\.]+)"),
    re.compile(r"R\$\s*([\d,\.]+)Quantidade:"),
]
BRAND_PATTERN = re.compile(r"Proposta adjudicada[\s\S]*?Marca/Fabricante:\s*([^\n\r]+)")
MODEL_PATTERN = re.compile(r"Proposta adjudicada[\s\S]*?Modelo/versão:\s*([^\n\r]+)")


@dataclass
class RecordRegion:
    """Trecho do documento em torno de uma frase de adjudicação"""
    item: Optional[str]
    heading: str
    before: str
    after: str


class AwardExtractor:
    """Extrator de propostas adjudicadas nos formatos de grupo e individual"""

    def __init__(self, field_recovery: str = "segment"):
        if field_recovery not in ("segment", "document"):
            raise ValueError(f"Estratégia de recuperação desconhecida: {field_recovery}")
        self.field_recovery = field_recovery

    def extract(self, text: str) -> List[Award]:
        """Formato de grupo primeiro; se nada casar, formato individual"""
        grouped = self.extract_grouped(text)
        if grouped:
            logger.info(f"📊 Formato de grupo detectado: {len(grouped)} propostas encontradas")
            return grouped

        individual = self.extract_individual(text)
        logger.info(f"📊 Formato individual detectado: {len(individual)} propostas encontradas")
        return individual

    def extract_grouped(self, text: str) -> List[GroupedAward]:
        propostas: List[GroupedAward] = []
        seen: Set[Tuple[str, str, str]] = set()

        for match in GROUPED_PATTERN.finditer(text):
            cnpj = match.group('cnpj').strip()
            item = match.group('item').strip()
            grupo = f"G{match.group('grupo')}"

            key = (grupo, item, cnpj)
            if key in seen:
                continue
            seen.add(key)

            responsavel_text = match.group('responsavel')
            melhor_lance = self._clean_amount(match.group('melhor_lance'))

            proposta = GroupedAward(
                item=item,
                grupo=grupo,
                descricao=match.group('descricao').strip(),
                quantidade=match.group('quantidade').strip().rstrip('.'),
                valor_estimado=self._clean_amount(match.group('valor')),
                valor_adjudicado=melhor_lance,
                fornecedor=match.group('fornecedor').strip(),
                cnpj=cnpj,
                melhor_lance=melhor_lance,
                responsavel=self._clean_official_name(responsavel_text),
                cpf_responsavel=self.extract_masked_cpf(responsavel_text),
            )

            logger.info(
                f"✅ Proposta de grupo extraída - Item: {proposta.item}, Grupo: {proposta.grupo}, "
                f"Fornecedor: {proposta.fornecedor}, CNPJ: {proposta.cnpj}, Valor: R$ {proposta.valor_adjudicado}"
            )
            propostas.append(proposta)

        return propostas

    def extract_individual(self, text: str) -> List[IndividualAward]:
        propostas: List[IndividualAward] = []
        seen_cnpjs: Set[str] = set()
        headings = list(ITEM_HEADING.finditer(text))

        for pattern, has_negotiated in INDIVIDUAL_PATTERNS:
            for match in pattern.finditer(text):
                cnpj = match.group('cnpj').strip()
                if cnpj in seen_cnpjs:
                    continue
                seen_cnpjs.add(cnpj)

                melhor_lance = self._clean_amount(match.group('melhor_lance'))
                if has_negotiated:
                    valor_adjudicado = self._clean_amount(match.group('valor_negociado'))
                else:
                    valor_adjudicado = melhor_lance

                if self.field_recovery == "segment":
                    fields = self._recover_from_segment(text, match, headings)
                else:
                    fields = self._recover_from_document(text, cnpj)

                proposta = IndividualAward(
                    valor_adjudicado=valor_adjudicado,
                    fornecedor=match.group('fornecedor').strip(),
                    cnpj=cnpj,
                    melhor_lance=melhor_lance,
                    responsavel=match.group('responsavel').strip(),
                    cpf_responsavel=match.group('cpf').strip(),
                    **fields,
                )

                logger.info(
                    f"✅ Proposta individual extraída - Item: {proposta.item}, "
                    f"Fornecedor: {proposta.fornecedor}, CNPJ: {proposta.cnpj}, Valor: R$ {proposta.valor_adjudicado}"
                )
                propostas.append(proposta)

        return propostas

    # Recuperação por proximidade

    def _region_for(self, text: str, match: re.Match, headings: List[re.Match]) -> RecordRegion:
        """Delimita o trecho entre o cabeçalho "Item N" anterior e o seguinte"""
        starts = [h.start() for h in headings]
        idx = bisect.bisect_left(starts, match.start()) - 1

        if idx >= 0:
            heading = headings[idx]
            item = heading.group('item')
            heading_text = heading.group('resto')
            before = text[heading.start():match.start()]
        else:
            item = None
            heading_text = ""
            before = text[:match.start()]

        next_idx = bisect.bisect_left(starts, match.end())
        end = headings[next_idx].start() if next_idx < len(headings) else len(text)
        after = text[match.end():end]

        return RecordRegion(item=item, heading=heading_text, before=before, after=after)

    def _recover_from_segment(self, text: str, match: re.Match, headings: List[re.Match]) -> dict:
        region = self._region_for(text, match, headings)

        return {
            'item': region.item or NOT_AVAILABLE,
            'descricao': self._clean_description(region.heading),
            'quantidade': self._first_group(QUANTITY_PATTERNS, region.before),
            'valor_estimado': self._clean_amount(self._first_group(ESTIMATED_VALUE_PATTERNS, region.before)),
            'marca_fabricante': self._first_group([BRAND_PATTERN], region.after),
            'modelo_versao': self._first_group([MODEL_PATTERN], region.after),
        }

    def _recover_from_document(self, text: str, cnpj: str) -> dict:
        """Busca no documento inteiro: primeira ocorrência ancorada no CNPJ"""
        anchor = re.escape(cnpj)

        item = self._first_group([re.compile(r"Item\s+(\d+)[^#]*?" + anchor)], text)

        descricao = NOT_AVAILABLE
        desc_match = re.search(r"Item\s+\d+[^#]*?([^#]*?)" + anchor, text)
        if desc_match:
            descricao = self._clean_description(desc_match.group(1).split('\n')[0])

        quantidade = self._first_group([
            re.compile(r"Quantidade:\s*(\d[\d\.]*)[^#]*?" + anchor),
            re.compile(r"Unidade\s+(\d+)[^#]*?" + anchor),
        ], text)
        valor_estimado = self._first_group([
            re.compile(r"Valor\s+estimado:\s*R\$\s*([\d,\.]+)[^#]*?" + anchor),
            re.compile(r"R\$\s*([\d,\.]+)Quantidade:[^#]*?" + anchor),
        ], text)
        marca = self._first_group([
            re.compile(anchor + r"[\s\S]*?Proposta adjudicada[\s\S]*?Marca/Fabricante:\s*([^\n\r]+)")
        ], text)
        modelo = self._first_group([
            re.compile(anchor + r"[\s\S]*?Proposta adjudicada[\s\S]*?Modelo/versão:\s*([^\n\r]+)")
        ], text)

        return {
            'item': item,
            'descricao': descricao,
            'quantidade': quantidade,
            'valor_estimado': self._clean_amount(valor_estimado),
            'marca_fabricante': marca,
            'modelo_versao': modelo,
        }

    # Limpeza de valores

    @staticmethod
    def extract_masked_cpf(text: str) -> str:
        """Recupera o CPF (mascarado ou não) do texto livre do responsável"""
        match = MASKED_CPF.search(text or "")
        return match.group(0) if match else NOT_AVAILABLE

    @staticmethod
    def _clean_official_name(text: str) -> str:
        name = CPF_PREFIX.sub("", text.strip()).strip().rstrip(',').strip()
        return name or NOT_AVAILABLE

    @staticmethod
    def _clean_description(text: str) -> str:
        value = text.strip().lstrip('-–:').strip()
        return value or NOT_AVAILABLE

    @staticmethod
    def _clean_amount(value: str) -> str:
        # "R$ 1.200,00, valor negociado" deixa a vírgula final na captura
        if value == NOT_AVAILABLE:
            return value
        return value.strip().rstrip(',.')

    @staticmethod
    def _first_group(patterns: List[re.Pattern], text: str) -> str:
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                value = match.group(1).strip()
                if value:
                    return value
        return NOT_AVAILABLE
