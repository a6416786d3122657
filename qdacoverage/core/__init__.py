# Core analysis module
from qdacoverage.core.analyzer import CoverageAnalyzer, normalize_text
from qdacoverage.core.matching import PositionStrategy, SubstringStrategy, build_strategy
from qdacoverage.core.pages import Page, PaginatedDocument, parse_position

__all__ = [
    "CoverageAnalyzer",
    "normalize_text",
    "Page",
    "PaginatedDocument",
    "parse_position",
    "PositionStrategy",
    "SubstringStrategy",
    "build_strategy",
]
