"""
licita-extract: extração de propostas adjudicadas de termos de homologação e cruzamento com o SICAF
"""

__version__ = "0.1.0"
__author__ = "Licita Extract Team"

from .schema import (
    IndividualAward,
    GroupedAward,
    TenderReport,
    ConsolidatedAward,
    TenderGroup,
    RegistryRecord,
    ComparisonReport,
    ProcessingResult,
    RegistryProcessingResult,
    ProcessingConfig
)

from .errors import LicitaError
from .rules import AwardExtractor
from .report import TenderReportBuilder
from .batch import BatchRunner, BatchContext
from .consolidate import Consolidator
from .registry import RegistryExtractor
from .matching import MatchingEngine, normalize_cnpj

__all__ = [
    "IndividualAward",
    "GroupedAward",
    "TenderReport",
    "ConsolidatedAward",
    "TenderGroup",
    "RegistryRecord",
    "ComparisonReport",
    "ProcessingResult",
    "RegistryProcessingResult",
    "ProcessingConfig",
    "LicitaError",
    "AwardExtractor",
    "TenderReportBuilder",
    "BatchRunner",
    "BatchContext",
    "Consolidator",
    "RegistryExtractor",
    "MatchingEngine",
    "normalize_cnpj"
]
