"""
Falhas tipadas expostas pelas operações públicas
"""
from typing import Any, Dict, Optional


class LicitaError(Exception):
    """Falha de uma operação, com categoria e mensagem legível"""

    error_type = "ProcessingError"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.error_type,
            "message": self.message,
            "details": self.details,
        }


class InputNotFoundError(LicitaError):
    """Arquivo ou diretório de entrada inexistente"""
    error_type = "FileSystemError"


class InvalidInputError(LicitaError):
    """Entrada com extensão ou conteúdo inválido"""
    error_type = "ValidationError"


class ExtractionError(LicitaError):
    """Falha ao converter um documento em texto"""
    error_type = "ProcessingError"


class OutputWriteError(LicitaError):
    error_type = "FileSystemError"


class SerializationError(LicitaError):
    error_type = "SerializationError"


class JsonParseError(LicitaError):
    error_type = "ParseError"
