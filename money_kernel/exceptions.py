"""
Typed Exception Hierarchy for the Money Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Monetary code must fail loudly and precisely. Callers catch by type, never
by parsing a message string:

    try:
        total = price.plus(shipping)
    except CurrencyMismatchError as e:
        log.warning(f"{e.expected} vs {e.actual}")   # Structured data
        api_response(code=e.code)                    # Machine-readable

Every exception:
  1. Has a TYPED class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from MoneyError:

    MoneyError (base)
    |
    +-- UnknownCurrencyError
    +-- CurrencyMismatchError
    +-- RoundingNecessaryError
    +-- InvalidArgumentError
    |   +-- NumberFormatError
    +-- CurrencyConversionError
    +-- MoneyParseError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Code                               | When Raised
-----------------------------------|--------------------------------------------
UNKNOWN_CURRENCY                   | Code, numeric code or country not found
CURRENCY_MISMATCH                  | Binary operation across two currencies
ROUNDING_NECESSARY                 | Precision loss under RoundingMode.UNNECESSARY
INVALID_ARGUMENT                   | Bad scale, step, ratio or configuration
NUMBER_FORMAT                      | Amount that is not a finite number
CURRENCY_CONVERSION_NOT_AVAILABLE  | No exchange rate for a currency pair
MONEY_PARSE_FAILED                 | Malformed "<CODE> <amount>" string

===============================================================================
PROPAGATION
===============================================================================

All of the above are unrecoverable at the point of call. Provider chains
catch only their own "not found" type (UnknownCurrencyError for currency
providers, CurrencyConversionError for exchange rate providers) and try
the next delegate; anything else propagates unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable


class MoneyError(Exception):
    """
    Base exception for all money kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "MONEY_ERROR"


class UnknownCurrencyError(MoneyError):
    """A currency code, numeric code or country could not be resolved."""

    code: str = "UNKNOWN_CURRENCY"

    def __init__(self, message: str, currency_code: str | int | None = None):
        self.currency_code = currency_code
        super().__init__(message)

    @classmethod
    def unknown_currency(cls, currency_code: str | int) -> UnknownCurrencyError:
        return cls(f"Unknown currency code: {currency_code}", currency_code)

    @classmethod
    def no_currency_for_country(cls, country_code: str) -> UnknownCurrencyError:
        return cls(f"No currency found for country {country_code}")

    @classmethod
    def no_single_currency_for_country(
        cls, country_code: str, currency_codes: Iterable[str]
    ) -> UnknownCurrencyError:
        return cls(
            f"No single currency for country {country_code}: "
            f"{', '.join(currency_codes)}"
        )


class CurrencyMismatchError(MoneyError):
    """
    Two monies in different currencies were combined or compared.

    Never silently coerced: convert explicitly with a CurrencyConverter.
    """

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The monies do not share the same currency: "
            f"expected {expected}, got {actual}."
        )


class RoundingNecessaryError(MoneyError):
    """The result is not representable without a rounding mode."""

    code: str = "ROUNDING_NECESSARY"

    def __init__(self, message: str = "Rounding is necessary to represent the result."):
        super().__init__(message)


class InvalidArgumentError(MoneyError):
    """Malformed argument or configuration."""

    code: str = "INVALID_ARGUMENT"

    @classmethod
    def invalid_scale(cls, scale: int) -> InvalidArgumentError:
        return cls(f"Invalid scale: {scale}.")

    @classmethod
    def invalid_step(cls, step: int) -> InvalidArgumentError:
        return cls(f"Invalid step: {step}.")


class NumberFormatError(InvalidArgumentError):
    """A value could not be read as a finite number."""

    code: str = "NUMBER_FORMAT"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"The given value does not represent a valid number: {value!r}")


class CurrencyConversionError(MoneyError):
    """No exchange rate is available for the requested pair."""

    code: str = "CURRENCY_CONVERSION_NOT_AVAILABLE"

    def __init__(
        self,
        message: str,
        source_currency_code: str,
        target_currency_code: str,
        info: str | None = None,
    ):
        self.source_currency_code = source_currency_code
        self.target_currency_code = target_currency_code
        self.info = info
        super().__init__(message)

    @classmethod
    def exchange_rate_not_available(
        cls,
        source_currency_code: str,
        target_currency_code: str,
        info: str | None = None,
    ) -> CurrencyConversionError:
        message = (
            f"No exchange rate available to convert "
            f"{source_currency_code} to {target_currency_code}"
        )
        if info is not None:
            message += f" ({info})"
        return cls(message, source_currency_code, target_currency_code, info)


class MoneyParseError(MoneyError):
    """A string could not be parsed as "<CODE> <amount>"."""

    code: str = "MONEY_PARSE_FAILED"

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse {text!r} as money: {reason}")
