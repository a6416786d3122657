import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Matching strategy: "substring" or "position"
    STRATEGY: str = os.getenv("QDA_STRATEGY", "substring")

    # Text handling
    SENTENCE_TERMINATOR: str = os.getenv("QDA_SENTENCE_TERMINATOR", ".")
    # Raw page delimiter; escapes like "\r\n" are decoded
    PAGE_DELIMITER: str = (
        os.getenv("QDA_PAGE_DELIMITER", r"\r\n\r\n").encode("utf-8").decode("unicode_escape")
    )

    # Annotation export
    CSV_DELIMITER: str = os.getenv("QDA_CSV_DELIMITER", ";")
    CSV_ENCODING: str = os.getenv("QDA_CSV_ENCODING", "utf-8-sig")

    # Defaults
    DEFAULT_OUTPUT_CSV: str = "coverage_results.csv"


settings = Settings()
