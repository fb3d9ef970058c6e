"""Plain-text and JSON-ready rendering of batch outcomes."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Iterable

from .models import FetchError, NormalizedQuote, UsdPrice

SEPARATOR = "-" * 33


def outcome_to_dict(outcome: NormalizedQuote | UsdPrice | FetchError) -> dict[str, Any]:
    """Serialize one outcome; raw prices become strings to survive JSON."""
    data = asdict(outcome)
    data["ok"] = outcome.ok
    if "raw_price" in data:
        data["raw_price"] = str(data["raw_price"])
    return data


def outcomes_to_dicts(outcomes: Iterable[NormalizedQuote | UsdPrice | FetchError]) -> list[dict[str, Any]]:
    return [outcome_to_dict(o) for o in outcomes]


def _error_block(outcome: FetchError) -> list[str]:
    return [f"{outcome.symbol}: Error fetching price - {outcome.message}"]


def format_quotes(outcomes: Iterable[NormalizedQuote | FetchError]) -> str:
    """Render quotes the way the price check scripts print them."""
    lines: list[str] = []
    for outcome in outcomes:
        if isinstance(outcome, FetchError):
            lines.extend(_error_block(outcome))
        else:
            lines.extend(
                [
                    f"{outcome.symbol}: ${outcome.normalized_price} ({outcome.description})",
                    f"  Raw Oracle Value: {outcome.raw_price}",
                    f"  Decimals: {outcome.decimals}",
                    f"  Last Updated At: {outcome.updated_at_iso}",
                ]
            )
        lines.append(SEPARATOR)
    return "\n".join(lines)


def format_usd_prices(outcomes: Iterable[UsdPrice | FetchError]) -> str:
    lines: list[str] = []
    for outcome in outcomes:
        if isinstance(outcome, FetchError):
            lines.extend(_error_block(outcome))
        else:
            lines.append(f"{outcome.symbol}: ${outcome.formatted}")
    return "\n".join(lines)
