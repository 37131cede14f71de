from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional
import csv, logging

from pydantic import ValidationError

from schemas import CatalogEntry

logger = logging.getLogger(__name__)

# CSV header names (as exported by the storefront)
REQUIRED_FIELDS = ("displayTitle", "embeddingText", "price")
OPTIONAL_FIELDS = ("url", "imageUrl", "productType", "discount", "variants", "createDate")


class CatalogUnavailable(RuntimeError):
    """The catalog file is missing or cannot be read."""


class CatalogRowMalformed(ValueError):
    """A single row lacks a required field or carries a non-numeric number."""

    def __init__(self, line: int, reason: str):
        super().__init__(f"row {line}: {reason}")
        self.line = line
        self.reason = reason


def parse_row(row: Dict[str, Any], line: int) -> CatalogEntry:
    missing = [f for f in REQUIRED_FIELDS if not (row.get(f) or "").strip()]
    if missing:
        raise CatalogRowMalformed(line, "missing " + ", ".join(missing))

    data = {f: (row.get(f) or "").strip() for f in REQUIRED_FIELDS + OPTIONAL_FIELDS}
    if not data["discount"]:
        data["discount"] = 0.0
    try:
        return CatalogEntry(**data)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise CatalogRowMalformed(line, "invalid " + ", ".join(fields)) from None


def _skip(err: CatalogRowMalformed) -> None:
    logger.warning("Skipping malformed catalog %s", err)


class CatalogLoader:
    """
    Streams CatalogEntry records out of a delimited product file.
    Every iteration opens the file again, so two passes never share a cursor.
    """
    def __init__(self, path: Path, delimiter: str = ","):
        self.path = Path(path)
        self.delimiter = delimiter

    def __iter__(self) -> Iterator[CatalogEntry]:
        return self.scan()

    def scan(self, on_malformed: Optional[Callable[[CatalogRowMalformed], None]] = None) -> Iterator[CatalogEntry]:
        on_malformed = on_malformed or _skip
        try:
            fh = self.path.open("r", encoding="utf-8-sig", newline="")
        except OSError as e:
            raise CatalogUnavailable(f"Cannot open catalog {self.path}: {e}") from e

        with fh:
            reader = csv.DictReader(fh, delimiter=self.delimiter)
            # header is line 1
            try:
                for line, row in enumerate(reader, start=2):
                    try:
                        yield parse_row(row, line)
                    except CatalogRowMalformed as err:
                        on_malformed(err)
            except (UnicodeDecodeError, csv.Error) as e:
                raise CatalogUnavailable(f"Cannot read catalog {self.path}: {e}") from e

    def entries(self) -> List[CatalogEntry]:
        return list(self.scan())
