from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional
import logging, random

from schemas import CatalogEntry

logger = logging.getLogger(__name__)

MAX_RESULTS = 2
CLOSING_LINE = "Would any of these interest you?"

def _matches(entry: CatalogEntry, needle: str) -> bool:
    return needle in entry.display_title.lower() or needle in entry.embedding_text.lower()

def _format_price(p: float) -> str:
    return str(int(p)) if float(p).is_integer() else f"{p:.2f}"

def _format_entry(i: int, e: CatalogEntry) -> str:
    return (
        f"{i}. **{e.display_title}**\n"
        f"   - {e.embedding_text}\n"
        f"   - Price: ${_format_price(e.price)} USD"
    )

@dataclass
class SearchResult:
    query: str
    entries: List[CatalogEntry] = field(default_factory=list)
    matched: bool = False

    @property
    def header(self) -> str:
        if self.matched:
            return f'Here are some products related to your query: "{self.query}"'
        return (
            f'I couldn\'t find any specific products for "{self.query}", '
            "but here are a couple of other options you might like:"
        )

    def render(self) -> str:
        if not self.entries:
            return "The product catalog is empty right now, so I have nothing to suggest."
        blocks = "\n\n".join(_format_entry(i, e) for i, e in enumerate(self.entries, start=1))
        return f"{self.header}\n\n{blocks}\n\n{CLOSING_LINE}"

class ProductFinder:
    """
    Substring search over the catalog:
    - a case-insensitive hit in title or description counts as a match
    - first MAX_RESULTS matches in catalog order win
    - otherwise MAX_RESULTS random entries are suggested instead
    The catalog is re-read on every call.
    """
    def __init__(self, catalog: Iterable[CatalogEntry], rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.rng = rng or random.Random()

    def find(self, query: str) -> SearchResult:
        q = (query or "").strip()
        needle = q.lower()
        everything: List[CatalogEntry] = []
        hits: List[CatalogEntry] = []
        for entry in self.catalog:
            everything.append(entry)
            if needle and _matches(entry, needle):
                hits.append(entry)

        if hits:
            logger.info("Product search %r: %d matches", q, len(hits))
            return SearchResult(query=q, entries=hits[:MAX_RESULTS], matched=True)

        k = min(MAX_RESULTS, len(everything))
        logger.info("Product search %r: no match, suggesting %d fallback items", q, k)
        return SearchResult(query=q, entries=self.rng.sample(everything, k), matched=False)
