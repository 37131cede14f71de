from __future__ import annotations
import logging, re
from typing import Any, Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

# "100 - 200", "1,000-2,500", "-100 - 200"
_RANGE = re.compile(r"^\s*(?P<low>[-+]?[^-+\s][^-]*?)\s*-\s*(?P<high>[-+]?[^-+\s][^-]*?)\s*$")

def _to_number(x: Any) -> Optional[float]:
    if isinstance(x, bool) or x is None:
        return None
    if isinstance(x, (int, float)):
        return float(x)
    try:
        return float(str(x).replace(",", "").strip())
    except ValueError:
        return None

def _show(x: float) -> str:
    return str(int(x)) if x.is_integer() else f"{x:g}"

def parse_amount(amount: Any) -> Tuple[Optional[Tuple[float, Optional[float]]], Optional[str]]:
    """
    Returns ((low, high), None) on success, with high=None for a single amount,
    or (None, error_text) when the amount cannot be read.
    """
    value = _to_number(amount)
    if value is not None:
        return (value, None), None
    if isinstance(amount, str):
        m = _RANGE.match(amount)
        if m:
            low, high = _to_number(m.group("low")), _to_number(m.group("high"))
            if low is None or high is None:
                return None, f'Invalid range "{amount}": both bounds must be numbers, e.g. "100 - 200".'
            return (min(low, high), max(low, high)), None
    return None, f'Invalid amount "{amount}": expected a number or a range like "100 - 200".'

class CurrencyConverter:
    """
    Converts amounts with live rates from the fastFOREX `fetch-multi` endpoint.
    `convert` never raises: every failure comes back as text for the model.
    """
    def __init__(self, api_key: str, base_url: str = "https://api.fastforex.io",
                 timeout: float = 10.0, session: Any = None):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests

    def fetch_rates(self, from_currency: str, to_currency: str) -> Dict[str, float]:
        resp = self.http.get(
            f"{self.base_url}/fetch-multi",
            params={"from": from_currency, "to": to_currency, "api_key": self.api_key},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        results = data.get("results") if isinstance(data, dict) else None
        rates: Dict[str, float] = {}
        for code, rate in (results or {}).items():
            r = _to_number(rate)
            if r is not None:
                rates[str(code).upper()] = r
        return rates

    def convert(self, amount: Any, from_currency: Optional[str], to_currency: Optional[str]) -> str:
        src = (from_currency or "").strip().upper()
        dst = (to_currency or "").strip().upper()
        if not src or not dst:
            return "Both a source and a target currency code are required (e.g. EUR to USD)."

        bounds, err = parse_amount(amount)
        if err:
            return err
        low, high = bounds

        try:
            rates = self.fetch_rates(src, dst)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Exchange rate lookup %s->%s failed: %s", src, dst, e)
            return f"Currency conversion failed for {src} to {dst}. Please try again later."

        if not rates:
            return f"No conversion rates found for {src} to {dst}."

        if high is not None:
            target = dst.split(",")[0].strip()
            rate = rates.get(target)
            if rate is None:
                return f"No conversion rate found for {src} to {target}."
            return (f"{_show(low)} - {_show(high)} {src} ≈ "
                    f"{low * rate:.2f} - {high * rate:.2f} {target}")

        return " | ".join(f"{_show(low)} {src} ≈ {low * rate:.2f} {code}" for code, rate in rates.items())
