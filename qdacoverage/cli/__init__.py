# CLI commands module
from qdacoverage.cli.analyze import run_analyze

__all__ = [
    "run_analyze",
]
