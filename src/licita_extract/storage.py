"""
Leitura e escrita dos arquivos JSON gerados
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .errors import InputNotFoundError, InvalidInputError, JsonParseError, OutputWriteError, SerializationError

logger = logging.getLogger(__name__)


def write_json(path: Union[str, Path], payload: Dict[str, Any]) -> Path:
    """Grava o payload com acentuação preservada e indentação de 2 espaços"""
    path = Path(path)
    try:
        content = json.dumps(payload, ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Erro ao serializar {path.name}: {e}", details=str(path)) from e

    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        raise OutputWriteError(f"Erro ao salvar arquivo JSON: {path.name}: {e}", details=str(path)) from e

    logger.info(f"💾 JSON salvo em: {path}")
    return path


def read_json(path: Union[str, Path]) -> Dict[str, Any]:
    """Lê um arquivo .json existente; conteúdo inválido é ParseError"""
    path = Path(path)
    if not path.exists():
        raise InputNotFoundError(f"Arquivo não encontrado: {path}", details=str(path))
    if path.suffix != ".json":
        raise InvalidInputError("O arquivo deve ter extensão .json", details=str(path))

    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise JsonParseError(f"Erro ao analisar JSON: {e}", details=str(path)) from e
    except OSError as e:
        raise InputNotFoundError(f"Erro ao ler arquivo: {e}", details=str(path)) from e
