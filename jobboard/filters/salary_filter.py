"""
Salary Filter - Normalize free-form salaries and match them against buckets

Job salaries are free text ("₦500,000 – 600,000", "300k+", "Negotiable").
Each salary is reduced to the smallest figure it mentions so that a job only
passes a ">= X" bucket when it is guaranteed to pay at least X. Salaries
that contain no figure at all always pass (fail-open).
"""

import re
import math
import logging
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Shorthand multipliers ("300k", "1.5M")
MULTIPLIERS = {
    'k': 1_000,
    'm': 1_000_000,
}

# A number immediately followed by a k/m suffix that is not the start of a word.
# Commas are thousands separators only, never a decimal point: "1,5k" is 15000.
SUFFIX_PATTERN = re.compile(r'(\d+(?:[.,]\d+)*)\s*([km])(?![a-z])', re.IGNORECASE)

# Range separators are treated as whitespace so "500,000-600,000" stays two figures
RANGE_SEPARATORS = re.compile(r'\s+to\s+|[-–—/]', re.IGNORECASE)

# Bucket tokens: "300k+", "1M+", "300000", "100000-200000", "100k-200k"
BUCKET_PATTERN = re.compile(
    r'^(\d+(?:\.\d+)?)([km])?(?:-(\d+(?:\.\d+)?)([km])?|(\+))?$',
    re.IGNORECASE,
)


@dataclass(frozen=True)
class SalaryBucket:
    """Numeric bounds parsed from a salary filter token."""
    min: float
    max: Optional[float] = None  # None means open upper bound

    def contains(self, value: float) -> bool:
        if value < self.min:
            return False
        return self.max is None or value <= self.max


def _apply_multiplier(number: str, suffix: Optional[str]) -> float:
    value = float(number.replace(',', ''))
    if suffix:
        value *= MULTIPLIERS[suffix.lower()]
    return value


def _expand_suffixes(text: str) -> str:
    """Rewrite "300k" as " 300000.0 " so the plain-number pass can read it."""
    return SUFFIX_PATTERN.sub(
        lambda m: f" {_apply_multiplier(m.group(1), m.group(2))!r} ",
        text,
    )


def normalize_salary_to_minimum(raw: Union[str, int, float, None]) -> float:
    """
    Reduce a salary to the smallest positive figure it contains.

    Args:
        raw: Salary as stored on the job ("₦500,000 - ₦600,000", "400k", 250000)

    Returns:
        Smallest positive amount, or float('nan') when nothing parses

    Examples:
        >>> normalize_salary_to_minimum("₦500,000 - ₦600,000")
        500000.0
        >>> normalize_salary_to_minimum("300k+")
        300000.0
    """
    if raw is None or isinstance(raw, bool):
        return math.nan

    if isinstance(raw, (int, float)):
        return float(raw) if raw > 0 else math.nan

    text = _expand_suffixes(str(raw))
    text = RANGE_SEPARATORS.sub(' ', text)

    # Keep digits, periods and whitespace only (drops ₦, $, commas, words)
    cleaned = re.sub(r'[^\d.\s]', '', text)

    amounts = []
    for token in cleaned.split():
        try:
            value = float(token)
        except ValueError:
            continue
        if value > 0 and not math.isinf(value):
            amounts.append(value)

    if not amounts:
        return math.nan

    return min(amounts)


def parse_filter_bucket(token: str) -> SalaryBucket:
    """
    Parse a salary filter token into numeric bounds.

    Args:
        token: Bucket token such as "300k+", "1M+" or "100000-200000"

    Returns:
        SalaryBucket with min and (for ranges) max

    Raises:
        ValueError: If the token is not a recognizable bucket
    """
    if token is None:
        raise ValueError("Salary bucket is empty")

    # Drop currency symbols, thousands separators and spacing
    compact = re.sub(r'[^0-9a-z.+\-]', '', str(token).strip().lower())

    match = BUCKET_PATTERN.match(compact)
    if not match:
        raise ValueError(f"Unrecognized salary bucket: {token!r}")

    low_number, low_suffix, high_number, high_suffix, _plus = match.groups()
    low = _apply_multiplier(low_number, low_suffix)

    if high_number is None:
        return SalaryBucket(min=low)

    high = _apply_multiplier(high_number, high_suffix)
    if high < low:
        raise ValueError(f"Salary bucket upper bound is below lower bound: {token!r}")

    return SalaryBucket(min=low, max=high)


def salary_in_bucket(salary: Union[str, int, float, None], bucket: SalaryBucket) -> bool:
    """
    Check a job salary against a bucket.

    Unparsable salaries pass so that "Negotiable" jobs are never hidden.
    """
    value = normalize_salary_to_minimum(salary)
    if math.isnan(value):
        logger.debug(f"Salary {salary!r} not parsable, passing bucket {bucket}")
        return True
    return bucket.contains(value)


def format_bucket_label(bucket: SalaryBucket, currency_symbol: str = '₦') -> str:
    """
    Format a bucket for display in the filter bar.

    Returns:
        Label like "₦300,000+" or "₦100,000 - ₦200,000"
    """
    def format_value(val: float) -> str:
        return f"{currency_symbol}{int(val):,}"

    if bucket.max is None:
        return f"{format_value(bucket.min)}+"
    return f"{format_value(bucket.min)} - {format_value(bucket.max)}"
