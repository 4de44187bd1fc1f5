"""
Carregamento da configuração YAML
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from .errors import InvalidInputError
from .schema import ProcessingConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./config/default.yaml"


def _load_yaml(config_path: Union[str, Path]) -> Dict[str, Any]:
    """Lê o arquivo YAML; ausente, inválido ou sem mapeamento vira dicionário vazio"""
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"⚠️  Arquivo de configuração não encontrado: {config_path}, usando padrões")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"❌ Falha ao ler configuração {config_path}: {e}")
        return {}

    if not isinstance(raw, dict):
        logger.error(f"❌ Configuração {config_path} deve ser um mapeamento, usando padrões")
        return {}
    return raw


def _section(raw: Dict[str, Any], name: str, config_path: Union[str, Path]) -> Dict[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        logger.error(f"❌ Seção '{name}' de {config_path} deve ser um mapeamento, ignorada")
        return {}
    return section


def load_config(config_path: Optional[Union[str, Path]] = None) -> ProcessingConfig:
    """Monta a ProcessingConfig a partir das seções processing/output do YAML"""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    raw = _load_yaml(config_path)
    processing = _section(raw, 'processing', config_path)
    output = _section(raw, 'output', config_path)

    values: Dict[str, Any] = {}
    for key in ('verbose', 'supported_extensions', 'field_recovery', 'render_html', 'tool_name'):
        if key in processing:
            values[key] = processing[key]
    for key in ('summary_file', 'registry_file', 'comparison_file'):
        if key in output:
            values[key] = output[key]

    try:
        config = ProcessingConfig(**values)
    except ValidationError as e:
        fields = ", ".join(str(err['loc'][0]) for err in e.errors())
        raise InvalidInputError(f"Valores inválidos na configuração: {fields}", details=str(config_path)) from e

    config.supported_extensions = [
        ext if ext.startswith('.') else f'.{ext}' for ext in config.supported_extensions
    ]
    return config
