from __future__ import annotations
import json, logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from services.currency import CurrencyConverter
from services.product_finder import ProductFinder

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    SEARCH_PRODUCTS = "searchProducts"
    CONVERT_CURRENCIES = "convertCurrencies"


FUNCTION_DECLARATIONS = [
    {
        "name": ToolName.SEARCH_PRODUCTS.value,
        "description": "Search 2 relevant products from the catalog based on user query",
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": 'Search query, e.g., "phone", "gift for dad"',
                },
            },
            "required": ["query"],
        },
    },
    {
        "name": ToolName.CONVERT_CURRENCIES.value,
        "description": "Converts an amount, or a price range, from one currency to another.",
        "parameters": {
            "type": "object",
            "properties": {
                "amount": {
                    "type": ["number", "string"],
                    "description": 'The amount of money to convert, or a range like "100 - 200"',
                },
                "fromCurrency": {
                    "type": "string",
                    "description": "The 3-letter currency code to convert from (e.g., EUR)",
                },
                "toCurrency": {
                    "type": "string",
                    "description": "The 3-letter currency code to convert to (e.g., USD, COP)",
                },
            },
            "required": ["amount", "fromCurrency", "toCurrency"],
        },
    },
]


class SearchProductsArgs(BaseModel):
    query: str = ""


class ConvertCurrenciesArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Union[float, str, None] = None
    from_currency: str = Field("", alias="fromCurrency")
    to_currency: str = Field("", alias="toCurrency")


def parse_arguments(raw: Optional[str]) -> Dict[str, Any]:
    """Function-call arguments as a dict; anything unreadable becomes {}."""
    try:
        data = json.loads(raw or "{}")
    except (TypeError, ValueError):
        logger.warning("Malformed function arguments ignored: %r", raw)
        return {}
    if not isinstance(data, dict):
        logger.warning("Function arguments are not an object: %r", raw)
        return {}
    return data


def _typed(model, args: Dict[str, Any]):
    try:
        return model.model_validate(args)
    except ValidationError as e:
        logger.warning("Function arguments rejected for %s: %s", model.__name__, e)
        return model()


class ToolDispatcher:
    """Routes a function call to its handler; every handler returns text for the model."""

    def __init__(self, finder: ProductFinder, converter: CurrencyConverter):
        self.finder = finder
        self.converter = converter
        self._handlers: Dict[ToolName, Callable[[Dict[str, Any]], str]] = {
            ToolName.SEARCH_PRODUCTS: self._search_products,
            ToolName.CONVERT_CURRENCIES: self._convert_currencies,
        }

    def _search_products(self, args: Dict[str, Any]) -> str:
        parsed = _typed(SearchProductsArgs, args)
        return self.finder.find(parsed.query).render()

    def _convert_currencies(self, args: Dict[str, Any]) -> str:
        parsed = _typed(ConvertCurrenciesArgs, args)
        return self.converter.convert(parsed.amount, parsed.from_currency, parsed.to_currency)

    def dispatch(self, name: str, raw_arguments: Optional[str]) -> str:
        try:
            tool = ToolName(name)
        except ValueError:
            logger.warning("Model requested unsupported tool %r", name)
            return f"Unsupported tool: {name}"
        logger.info("Dispatching %s", tool.value)
        return self._handlers[tool](parse_arguments(raw_arguments))
