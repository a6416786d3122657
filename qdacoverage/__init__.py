"""qdacoverage package."""

from dotenv import load_dotenv

load_dotenv()

from qdacoverage.core.analyzer import CoverageAnalyzer
from qdacoverage.models import AnnotationRecord, DocumentReport, Position, SentenceStats
from qdacoverage.cli import run_analyze

__all__ = [
    "AnnotationRecord",
    "CoverageAnalyzer",
    "DocumentReport",
    "Position",
    "SentenceStats",
    "run_analyze",
]
