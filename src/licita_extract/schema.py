"""
Modelos Pydantic de entrada e saída
"""
from enum import Enum
from typing import Annotated, List, Optional, Literal, Union, Tuple
from pydantic import BaseModel, Field, PrivateAttr

from .values import sum_brl_values

NOT_AVAILABLE = "N/A"

STATUS_FOUND = "SICAF Encontrado"
STATUS_NOT_FOUND = "SICAF Não Encontrado"


class LayoutType(str, Enum):
    """Formato do termo de homologação que originou a proposta"""
    INDIVIDUAL = "individual"
    GROUPED = "grupo"


class _AwardBase(BaseModel):
    """Campos comuns às propostas adjudicadas"""
    item: str = Field(NOT_AVAILABLE, description="Número do item")
    descricao: str = Field(NOT_AVAILABLE, description="Descrição do item")
    quantidade: str = Field(NOT_AVAILABLE, description="Quantidade")
    valor_estimado: str = Field(NOT_AVAILABLE, description="Valor estimado (formato brasileiro)")
    valor_adjudicado: str = Field(..., description="Valor adjudicado (formato brasileiro)")
    fornecedor: str = Field(..., description="Razão social do fornecedor")
    cnpj: str = Field(..., description="CNPJ como impresso no documento")
    melhor_lance: str = Field(..., description="Melhor lance (formato brasileiro)")
    responsavel: str = Field(NOT_AVAILABLE, description="Responsável pela homologação")
    cpf_responsavel: str = Field(NOT_AVAILABLE, description="CPF mascarado do responsável")
    marca_fabricante: str = Field(NOT_AVAILABLE, description="Marca/fabricante")
    modelo_versao: str = Field(NOT_AVAILABLE, description="Modelo/versão")


class IndividualAward(_AwardBase):
    """Proposta do formato individual (sem grupo)"""
    tipo_formato: Literal["individual"] = "individual"
    grupo: None = None


class GroupedAward(_AwardBase):
    """Proposta do formato de grupo"""
    tipo_formato: Literal["grupo"] = "grupo"
    grupo: str = Field(..., description="Identificador do grupo, ex. G2")


AwardRecord = Annotated[Union[IndividualAward, GroupedAward], Field(discriminator="tipo_formato")]


class TenderReport(BaseModel):
    """Relatório de uma licitação (um documento)"""
    uasg: str = NOT_AVAILABLE
    pregao: str = NOT_AVAILABLE
    processo: str = NOT_AVAILABLE
    data_homologacao: str = NOT_AVAILABLE
    responsavel: str = NOT_AVAILABLE
    valor_total: float = 0.0
    propostas: List[AwardRecord] = Field(default_factory=list)

    @property
    def has_groups(self) -> bool:
        return any(isinstance(p, GroupedAward) for p in self.propostas)


class ConsolidatedAward(BaseModel):
    """Proposta acompanhada da licitação a que pertence"""
    uasg: str
    pregao: str
    processo: str
    item: str
    grupo: Optional[str] = None
    quantidade: str = NOT_AVAILABLE
    descricao: str = NOT_AVAILABLE
    valor_estimado: str = NOT_AVAILABLE
    valor_adjudicado: str
    fornecedor: str
    cnpj: str
    marca_fabricante: str = NOT_AVAILABLE
    modelo_versao: str = NOT_AVAILABLE
    responsavel: str = NOT_AVAILABLE
    cpf_responsavel: str = NOT_AVAILABLE
    melhor_lance: str = NOT_AVAILABLE
    tipo_formato: LayoutType = LayoutType.INDIVIDUAL

    @classmethod
    def from_award(cls, award: Union[IndividualAward, GroupedAward],
                   report: TenderReport) -> "ConsolidatedAward":
        data = award.model_dump()
        return cls(uasg=report.uasg, pregao=report.pregao, processo=report.processo, **data)

    @property
    def tender_key(self) -> Tuple[str, str, str]:
        return (self.uasg, self.pregao, self.processo)


class TenderGroup(BaseModel):
    """Agregado de propostas por UASG + pregão + processo"""
    uasg: str
    pregao: str
    processo: str
    total_propostas: int = 0
    valor_total: float = 0.0
    propostas: List[ConsolidatedAward] = Field(default_factory=list)

    _finalized: bool = PrivateAttr(default=False)

    @property
    def key(self) -> str:
        return f"{self.uasg}-{self.pregao}-{self.processo}"

    @property
    def file_name(self) -> str:
        return f"licitacao_{self.key.replace('/', '_').replace(' ', '_')}.json"

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add(self, proposta: ConsolidatedAward) -> None:
        """Acrescenta uma proposta e atualiza contagem e soma"""
        if self._finalized:
            raise RuntimeError(f"Licitação {self.key} já foi finalizada")
        self.propostas.append(proposta)
        self.total_propostas += 1
        self.valor_total = sum_brl_values(p.valor_adjudicado for p in self.propostas)

    def finalize(self) -> None:
        self._finalized = True


class RegistryRecord(BaseModel):
    """Dados de um certificado SICAF"""
    cnpj: str
    duns: Optional[str] = None
    empresa: str
    nome_fantasia: Optional[str] = None
    situacao_cadastro: Optional[str] = None
    data_vencimento: Optional[str] = None
    cep: Optional[str] = None
    endereco: Optional[str] = None
    municipio: Optional[str] = None
    uf: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None
    cpf_responsavel: Optional[str] = None
    nome_responsavel: Optional[str] = None


class ProposalProjection(BaseModel):
    """Resumo da proposta usado no relatório de comparação"""
    item: str
    valor_adjudicado: str
    uasg: str
    pregao: str


class ComparisonEntry(BaseModel):
    cnpj: str
    fornecedor: str
    status_sicaf: Literal["SICAF Encontrado", "SICAF Não Encontrado"]
    dados_sicaf: Optional[RegistryRecord] = None
    proposta: ProposalProjection

    @property
    def found(self) -> bool:
        return self.status_sicaf == STATUS_FOUND


class ComparisonReport(BaseModel):
    """Relatório de comparação licitação x SICAF"""
    data_geracao: str
    total_propostas: int
    sicaf_encontrados: int
    sicaf_nao_encontrados: int
    relatorio: List[ComparisonEntry] = Field(default_factory=list)


class ProcessingResult(BaseModel):
    """Resultado do processamento de termos de homologação"""
    success: bool = Field(..., description="Processamento concluído")
    message: str = Field(..., description="Mensagem para o usuário")
    propostas: List[ConsolidatedAward] = Field(default_factory=list)
    total_processed: int = Field(0, description="Documentos processados")
    json_file_path: Optional[str] = Field(None, description="Resumo geral gerado")
    markdown_files: List[str] = Field(default_factory=list, description="Relatórios Markdown gerados")
    errors: List[str] = Field(default_factory=list, description="Falhas por documento")


class RegistryProcessingResult(BaseModel):
    """Resultado do processamento de certificados SICAF"""
    success: bool
    message: str
    processed_count: int = 0
    sicaf_data: List[RegistryRecord] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class ProcessingConfig(BaseModel):
    """Configuração de processamento"""
    verbose: bool = Field(False, description="Log detalhado")
    supported_extensions: List[str] = Field(default_factory=lambda: [".pdf"], description="Extensões aceitas")
    field_recovery: Literal["segment", "document"] = Field(
        "segment", description="Estratégia de recuperação de campos por proximidade"
    )
    render_html: bool = Field(False, description="Gerar também HTML dos relatórios")
    tool_name: str = Field("licita-extract", description="Nome exibido no cabeçalho do Markdown")
    summary_file: str = Field("resumo_geral.json", description="Arquivo do resumo geral")
    registry_file: str = Field("sicaf_dados.json", description="Arquivo de dados SICAF")
    comparison_file: str = Field("relatorio_sicaf_comparacao.json", description="Arquivo de comparação")
