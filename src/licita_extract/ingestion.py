"""
Conversão de documentos em texto e descoberta de arquivos
"""
import logging
from pathlib import Path
from typing import Callable, List, Sequence, Union

import pdfplumber

from .errors import ExtractionError, InputNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)

TextExtractor = Callable[[Path], str]


def extract_text(document: Union[str, Path]) -> str:
    """Devolve o texto linear de um documento (.pdf ou .txt)"""
    path = Path(document)
    suffix = path.suffix.lower()

    try:
        if suffix == ".pdf":
            return _extract_pdf_text(path)
        if suffix == ".txt":
            return path.read_text(encoding="utf-8")
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Erro ao extrair texto de {path.name}: {e}", details=str(path)) from e

    raise InvalidInputError(f"Formato não suportado: {suffix}", details=str(path))


def _extract_pdf_text(path: Path) -> str:
    pages: List[str] = []
    with pdfplumber.open(str(path)) as pdf:
        for page in pdf.pages:
            pages.append(page.extract_text() or "")

    text = "\n".join(pages)
    logger.debug(f"📝 Texto extraído de {path.name}: {len(text)} caracteres em {len(pages)} páginas")
    return text


def _has_extension(path: Path, extensions: Sequence[str]) -> bool:
    return path.suffix in extensions


def discover_documents(directory: Union[str, Path], extensions: Sequence[str]) -> List[Path]:
    """Lista recursivamente os documentos com as extensões aceitas"""
    root = Path(directory)
    if not root.is_dir():
        raise InputNotFoundError(f"Diretório não encontrado: {root}", details=str(root))

    return sorted(
        p for p in root.rglob("*")
        if p.is_file() and _has_extension(p, extensions)
    )


def validate_document(document: Union[str, Path], extensions: Sequence[str]) -> Path:
    """Confere existência e extensão antes de qualquer extração"""
    path = Path(document)
    if not path.exists():
        raise InputNotFoundError(f"Arquivo não encontrado: {path}", details=str(path))

    if not _has_extension(path, extensions):
        raise InvalidInputError(
            f"O arquivo deve ter extensão {' ou '.join(extensions)}",
            details=str(path),
        )
    return path
