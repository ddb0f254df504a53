import re
from typing import Optional, Tuple


def scale_ingredient(ingredient: str, servings: int) -> str:
    """Scale the leading quantity of an ingredient line by a serving count.

    "2 cups rice" x2 -> "4 cups rice". Lines without a leading quantity get a
    multiplier suffix instead: "salt" x3 -> "salt (x3)".
    """
    text = ingredient.strip()
    if servings <= 1 or not text:
        return text

    quantity, rest = _parse_quantity(text)
    if quantity is None:
        return f"{text} (x{servings})"
    return f"{_format_quantity(quantity * servings)} {rest}".strip()


def _parse_quantity(text: str) -> Tuple[Optional[float], str]:
    match = re.match(r"^(\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?\s*-\s*\d+(?:\.\d+)?|\d+(?:\.\d+)?)", text)
    if not match:
        return None, text

    raw = match.group(1)
    rest = text[match.end():].strip()
    if "-" in raw:
        parts = [p.strip() for p in raw.split("-") if p.strip()]
        values = [_parse_number(p) for p in parts]
        values = [v for v in values if v is not None]
        if values:
            return sum(values) / len(values), rest
        return None, text

    value = _parse_number(raw)
    if value is None:
        return None, text
    return value, rest


def _parse_number(raw: str) -> Optional[float]:
    """Parse "2", "1.5", "1/2" or a mixed number like "1 1/2"."""
    total = 0.0
    for part in raw.split():
        numerator, _, denominator = part.partition("/")
        try:
            total += float(numerator) / float(denominator) if denominator else float(numerator)
        except (ValueError, ZeroDivisionError):
            return None
    return total


def _format_quantity(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")
