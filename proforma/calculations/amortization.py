"""
Loan Payment Calculations

Level-payment loan math used by the pro forma. The payment formula is
applied as-is: there is no special case for a zero rate, so a 0% loan
produces NaN or infinity rather than principal / months.

Python raises on float division by zero, on pow overflow and on negative
bases with fractional exponents. The helpers below return the IEEE-754
value instead so a calculation can always complete.
"""

import math


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value == int(value) and int(value) % 2 == 1


def ieee_divide(numerator: float, denominator: float) -> float:
    """
    Divide without raising ZeroDivisionError.

    x / 0 is an infinity signed by x and the zero; 0 / 0 and NaN / 0 are NaN.
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def ieee_pow(base: float, exponent: float) -> float:
    """
    Raise base to exponent without raising.

    Args:
        base: Base value
        exponent: Exponent value

    Returns:
        The power, or NaN / +-infinity where the result is undefined or
        out of range
    """
    if math.isnan(exponent):
        return math.nan
    if math.isinf(exponent) and abs(base) == 1:
        return math.nan
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0:
            # zero to a negative power
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        # negative base, fractional exponent
        return math.nan


def monthly_rate(interest_rate: float) -> float:
    """Convert an annual nominal rate in percent (6.5 = 6.5%) to a monthly decimal rate."""
    return interest_rate / 100 / 12


def amortization_months(amortization_years: float) -> float:
    return amortization_years * 12


def calculate_payment(principal: float, rate: float, months: float) -> float:
    """
    Calculate the level monthly loan payment.

    payment = principal * rate / (1 - (1 + rate) ^ -months)

    Args:
        principal: Loan principal amount
        rate: Monthly interest rate as decimal
        months: Amortization period in months

    Returns:
        Monthly payment; NaN or infinite when rate is 0
    """
    return ieee_divide(principal * rate, 1 - ieee_pow(1 + rate, -months))
