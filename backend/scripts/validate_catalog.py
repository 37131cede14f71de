"""
Quick validator: streams the product CSV and reports rows the server would skip
(missing title/description/price or a non-numeric number).
Exit status is 1 when the file is unreadable or any row is malformed.
"""
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from services.catalog_loader import CatalogLoader, CatalogUnavailable  # noqa: E402

CAT = ROOT / "data" / "products_list.csv"

def validate(path: Path):
    bad = []
    good = sum(1 for _ in CatalogLoader(path).scan(on_malformed=bad.append))
    return good, bad

def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    path = Path(argv[0]) if argv else CAT
    try:
        good, bad = validate(path)
    except CatalogUnavailable as e:
        print(f"Catalog unavailable: {e}")
        return 1
    for err in bad:
        print(f"  malformed {err}")
    print(f"Validated {good + len(bad)} rows in {path}. Valid: {good}, malformed: {len(bad)}")
    return 1 if bad else 0

if __name__ == "__main__":
    sys.exit(main())
