"""
Operações públicas: caminhos e strings na entrada, modelos Pydantic na saída
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from .batch import BatchRunner, ProgressCallback
from .consolidate import Consolidator
from .errors import InputNotFoundError, InvalidInputError, LicitaError, OutputWriteError
from .ingestion import discover_documents, validate_document
from .matching import MatchingEngine, save_comparison_report
from .registry import RegistryExtractor, extract_directory, load_registry_json, save_registry_json
from .schema import (
    ComparisonReport, ConsolidatedAward, ProcessingConfig, ProcessingResult,
    RegistryProcessingResult, RegistryRecord,
)
from .storage import read_json

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _prepare_output_dir(output_dir: PathLike) -> Path:
    out = Path(output_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(f"Erro ao criar diretório de saída: {e}", details=str(out)) from e
    return out


def process_document(file_path: PathLike, output_dir: PathLike,
                     config: Optional[ProcessingConfig] = None) -> ProcessingResult:
    """Processa um único termo de homologação e grava o Markdown e os JSON consolidados"""
    config = config or ProcessingConfig()
    document = validate_document(file_path, config.supported_extensions)
    out = _prepare_output_dir(output_dir)

    runner = BatchRunner(config)
    propostas = runner.process_document(document, out)
    resumo_path = save_consolidated(propostas, out, total_documentos=1, config=config)

    return ProcessingResult(
        success=True,
        message=f"Arquivo processado com sucesso: {len(propostas)} propostas encontradas",
        propostas=propostas,
        total_processed=1,
        json_file_path=str(resumo_path),
        markdown_files=[str(out / f"{document.stem}.md")],
    )


def process_directory(input_dir: PathLike, output_dir: PathLike,
                      progress_callback: Optional[ProgressCallback] = None,
                      config: Optional[ProcessingConfig] = None) -> ProcessingResult:
    """Processa todos os documentos do diretório e grava a consolidação"""
    config = config or ProcessingConfig()
    documents = discover_documents(input_dir, config.supported_extensions)
    if not documents:
        raise InvalidInputError(
            "Nenhum documento encontrado no diretório especificado", details=str(input_dir)
        )

    out = _prepare_output_dir(output_dir)
    context = BatchRunner(config).run(input_dir, out, progress_callback)
    resumo_path = save_consolidated(context.propostas, out, total_documentos=context.total, config=config)

    return ProcessingResult(
        success=True,
        message=f"Processamento concluído: {context.processed} arquivos processados",
        propostas=context.propostas,
        total_processed=context.processed,
        json_file_path=str(resumo_path),
        markdown_files=context.markdown_files,
        errors=context.errors,
    )


def save_consolidated(propostas: List[ConsolidatedAward], output_dir: PathLike,
                      total_documentos: Optional[int] = None,
                      config: Optional[ProcessingConfig] = None) -> Path:
    config = config or ProcessingConfig()
    consolidator = Consolidator(summary_file=config.summary_file)
    return consolidator.save(consolidator.group(propostas), output_dir, total_documentos)


def extract_registry_directory(registry_dir: PathLike,
                               config: Optional[ProcessingConfig] = None) -> RegistryProcessingResult:
    """Processa os certificados SICAF de um diretório"""
    config = config or ProcessingConfig()
    records, errors = extract_directory(registry_dir, config.supported_extensions, extractor=RegistryExtractor())

    if not records and not errors:
        message = "Nenhum certificado SICAF encontrado no diretório"
    else:
        message = f"Processamento concluído: {len(records)} arquivos processados"

    return RegistryProcessingResult(
        success=True,
        message=message,
        processed_count=len(records),
        sicaf_data=records,
        errors=errors,
    )


def save_registry(records: List[RegistryRecord], output_dir: PathLike,
                  config: Optional[ProcessingConfig] = None) -> Path:
    config = config or ProcessingConfig()
    return save_registry_json(records, _prepare_output_dir(output_dir), config.registry_file)


def _engine(registry_json_path: PathLike) -> MatchingEngine:
    return MatchingEngine(load_registry_json(registry_json_path))


def check_cnpj(cnpj: str, registry_json_path: PathLike) -> bool:
    return _engine(registry_json_path).exists(cnpj)


def lookup_cnpj(cnpj: str, registry_json_path: PathLike) -> Optional[RegistryRecord]:
    return _engine(registry_json_path).lookup(cnpj)


def generate_comparison_report(tender_json_path: PathLike, registry_json_path: PathLike,
                               output_dir: PathLike,
                               config: Optional[ProcessingConfig] = None) -> Path:
    """Compara as propostas de um licitacao_*.json com os registros SICAF"""
    config = config or ProcessingConfig()
    data = read_json(tender_json_path)

    raw = data.get("propostas") if isinstance(data, dict) else None
    if not isinstance(raw, list):
        raise InvalidInputError("Arquivo JSON não contém propostas válidas", details=str(tender_json_path))

    propostas: List[ConsolidatedAward] = []
    for item in raw:
        try:
            propostas.append(ConsolidatedAward.model_validate(item))
        except ValidationError as e:
            logger.warning(f"⚠️  Proposta ignorada em {tender_json_path}: {e.error_count()} campos inválidos")

    report: ComparisonReport = _engine(registry_json_path).compare(propostas)
    return save_comparison_report(report, _prepare_output_dir(output_dir), config.comparison_file)


# Utilitários de arquivo

def read_json_file(path: PathLike) -> Any:
    return read_json(path)


def list_documents(directory: PathLike, config: Optional[ProcessingConfig] = None) -> List[str]:
    config = config or ProcessingConfig()
    return [str(p) for p in discover_documents(directory, config.supported_extensions)]


def validate_document_file(path: PathLike, config: Optional[ProcessingConfig] = None) -> bool:
    """True se o arquivo existe e tem extensão aceita"""
    config = config or ProcessingConfig()
    try:
        validate_document(path, config.supported_extensions)
    except LicitaError:
        return False
    return True


def json_file_info(path: PathLike) -> Dict[str, Any]:
    """Metadados do arquivo e chaves da licitação encontradas no JSON"""
    file_path = Path(path)
    if not file_path.exists():
        raise InputNotFoundError(f"Arquivo não encontrado: {file_path}", details=str(file_path))

    stat = file_path.stat()
    info: Dict[str, Any] = {
        "file_name": file_path.name,
        "file_path": str(file_path),
        "file_size": stat.st_size,
        "modified_timestamp": int(stat.st_mtime),
    }

    try:
        data = read_json(file_path)
    except LicitaError as e:
        info["error"] = e.message
        return info

    if isinstance(data, dict):
        for key in ("data_geracao", "uasg", "pregao", "processo", "total_propostas", "valor_total"):
            if key in data:
                info[key] = data[key]
        if isinstance(data.get("propostas"), list):
            info["propostas_count"] = len(data["propostas"])
    return info
