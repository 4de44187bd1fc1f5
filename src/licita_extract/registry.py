"""
Extração de dados de certificados SICAF
"""
import re
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError

from .errors import JsonParseError
from .ingestion import TextExtractor, discover_documents, extract_text
from .report import timestamp
from .schema import RegistryRecord
from .storage import read_json, write_json

logger = logging.getLogger(__name__)

REGISTRY_PATTERN = re.compile(
    r"CNPJ:\s*(?P<cnpj>[\d./-]+)\s*(?:DUNS®:\s*(?P<duns>[\d]+)\s*)?"
    r"Razão Social:\s*(?P<empresa>.*?)\s*"
    r"Nome Fantasia:\s*(?P<nome_fantasia>.*?)\s*"
    r"Situação do Fornecedor:\s*(?P<situacao_cadastro>.*?)\s*"
    r"Data de Vencimento do Cadastro:\s*(?P<data_vencimento>\d{2}/\d{2}/\d{4})\s*"
    r"Dados do Nível.*?Dados para Contato\s*"
    r"CEP:\s*(?P<cep>[\d.-]+)\s*"
    r"Endereço:\s*(?P<endereco>.*?)\s*"
    r"Município\s*/\s*UF:\s*(?P<municipio>.*?)\s*/\s*(?P<uf>.*?)\s*"
    r"Telefone:\s*(?P<telefone>.*?)\s*"
    r"E-mail:\s*(?P<email>.*?)\s*"
    r"Dados do Responsável Legal",
    re.DOTALL,
)

LEGAL_REPRESENTATIVE_PATTERN = re.compile(
    r"Dados do Responsável Legal\s*CPF:\s*(?P<cpf>\d{3}\.\d{3}\.\d{3}-\d{2})\s*"
    r"Nome:\s*(?P<nome>[^\n\r]*?)"
    r"(?:\s*Dados do Responsável pelo Cadastro|\s*Emitido em:|\s*CPF:|\Z)",
    re.DOTALL,
)

OPTIONAL_FIELDS = (
    'duns', 'nome_fantasia', 'situacao_cadastro', 'data_vencimento', 'cep',
    'endereco', 'municipio', 'uf', 'telefone', 'email',
)


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class RegistryExtractor:
    """Extrator de certificados SICAF"""

    def extract(self, text: str) -> Optional[RegistryRecord]:
        """Devolve o registro do certificado ou None se o bloco principal não casar"""
        match = REGISTRY_PATTERN.search(text)
        if not match:
            return None

        record = RegistryRecord(
            cnpj=match.group('cnpj').strip(),
            empresa=match.group('empresa').strip(),
            **{name: _optional(match.group(name)) for name in OPTIONAL_FIELDS},
        )

        representative = self.extract_legal_representative(text)
        if representative:
            record.cpf_responsavel, record.nome_responsavel = representative

        logger.info(f"✅ Dados SICAF extraídos - CNPJ: {record.cnpj}, Empresa: {record.empresa}")
        return record

    @staticmethod
    def extract_legal_representative(text: str) -> Optional[Tuple[str, str]]:
        match = LEGAL_REPRESENTATIVE_PATTERN.search(text)
        if not match:
            return None
        return match.group('cpf').strip(), match.group('nome').strip()


def extract_directory(directory: Union[str, Path], extensions: Iterable[str] = (".pdf",),
                      text_extractor: TextExtractor = extract_text,
                      extractor: Optional[RegistryExtractor] = None) -> Tuple[List[RegistryRecord], List[str]]:
    """Processa todos os certificados do diretório; devolve registros e falhas"""
    extractor = extractor or RegistryExtractor()
    documents = discover_documents(directory, list(extensions))

    records: List[RegistryRecord] = []
    errors: List[str] = []

    for document in documents:
        logger.info(f"📄 Processando arquivo SICAF: {document}")
        try:
            text = text_extractor(document)
        except Exception as e:
            message = f"Erro ao processar {document}: {e}"
            logger.error(f"❌ {message}")
            errors.append(message)
            continue

        logger.info(f"📝 Texto extraído do SICAF: {len(text)} caracteres")
        record = extractor.extract(text)
        if record is None:
            logger.warning(f"⚠️  Dados SICAF não encontrados no arquivo: {document}")
            continue
        records.append(record)

    logger.info(f"📊 SICAF: {len(records)} de {len(documents)} arquivos processados")
    return records, errors


def save_registry_json(records: List[RegistryRecord], output_dir: Union[str, Path],
                       file_name: str = "sicaf_dados.json") -> Path:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    payload = {
        "data_geracao": timestamp(),
        "total_registros": len(records),
        "registros_sicaf": [r.model_dump(mode="json") for r in records],
    }
    return write_json(out / file_name, payload)


def load_registry_json(path: Union[str, Path]) -> List[RegistryRecord]:
    """Carrega os registros gravados por save_registry_json"""
    data = read_json(path)

    registros = data.get("registros_sicaf") if isinstance(data, dict) else None
    if not isinstance(registros, list):
        raise JsonParseError("Campo 'registros_sicaf' não encontrado no JSON", details=str(path))

    try:
        return [RegistryRecord.model_validate(r) for r in registros]
    except ValidationError as e:
        raise JsonParseError(f"Erro ao deserializar registro SICAF: {e}", details=str(path)) from e
