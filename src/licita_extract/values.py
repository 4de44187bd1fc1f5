"""
Conversão de valores monetários no formato brasileiro
"""
import math
from typing import Iterable, Optional


def parse_brl_value(text: Optional[str]) -> float:
    """Converte "1.234,56" em 1234.56; entradas inválidas viram 0.0"""
    if not text:
        return 0.0

    # Os padrões de captura podem trazer a vírgula/ponto que separa a frase seguinte
    cleaned = text.strip().rstrip(',.')
    cleaned = cleaned.replace('.', '').replace(',', '.')

    try:
        value = float(cleaned)
    except ValueError:
        return 0.0

    if not math.isfinite(value):
        return 0.0

    return value


def format_brl(value: float) -> str:
    """Formata um float como "1.234,56" """
    formatted = f"{value:,.2f}"
    return formatted.replace(',', '_').replace('.', ',').replace('_', '.')


def sum_brl_values(texts: Iterable[Optional[str]]) -> float:
    """Soma exata (math.fsum): o resultado não depende da ordem das parcelas"""
    return math.fsum(parse_brl_value(t) for t in texts)
