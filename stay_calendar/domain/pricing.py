"""
Stay price breakdown: nightly rate x nights, cleaning fee, service fee, total.
"""
import datetime
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from stay_calendar.core.config import settings
from stay_calendar.domain.intervals import day_difference


@dataclass(frozen=True)
class PricingTerms:
    price_per_night: Decimal
    cleaning_fee: Decimal = Decimal("0")
    # None or 0 means the platform default rate applies
    service_fee: Optional[Decimal] = None


@dataclass(frozen=True)
class PriceQuote:
    nights: int
    nightly_rate: Decimal
    accommodation_cost: Decimal
    cleaning_fee: Decimal
    service_fee: Decimal
    total: Decimal


def _quantum(decimal_places: int) -> Decimal:
    return Decimal(1).scaleb(-decimal_places)


def round_money(amount: Decimal, decimal_places: Optional[int] = None) -> Decimal:
    """Round half up to the currency's minor unit."""
    if decimal_places is None:
        decimal_places = settings.currency_decimal_places
    return amount.quantize(_quantum(decimal_places), rounding=ROUND_HALF_UP)


def quote_stay(
    check_in: datetime.date,
    check_out: datetime.date,
    terms: PricingTerms,
    service_fee_rate: Optional[float] = None,
) -> Optional[PriceQuote]:
    """
    Price a stay from check_in to check_out.

    Returns None when the property has no nightly price: a zero total
    must never be presented as a valid booking.
    """
    nights = day_difference(check_out, check_in)
    if nights <= 0:
        raise ValueError(f"Check-out must be after check-in: {check_in} - {check_out}")

    price_per_night = Decimal(terms.price_per_night)
    cleaning_fee = Decimal(terms.cleaning_fee)
    explicit_service_fee = Decimal(terms.service_fee or 0)

    if cleaning_fee < 0 or explicit_service_fee < 0:
        raise ValueError("Fees must not be negative")
    if price_per_night <= 0:
        return None

    if service_fee_rate is None:
        service_fee_rate = settings.default_service_fee_rate

    accommodation_cost = round_money(price_per_night * nights)
    if explicit_service_fee > 0:
        service_fee = round_money(explicit_service_fee)
    else:
        service_fee = round_money(accommodation_cost * Decimal(str(service_fee_rate)))
    cleaning_fee = round_money(cleaning_fee)

    return PriceQuote(
        nights=nights,
        nightly_rate=round_money(price_per_night),
        accommodation_cost=accommodation_cost,
        cleaning_fee=cleaning_fee,
        service_fee=service_fee,
        total=accommodation_cost + cleaning_fee + service_fee,
    )


def format_money(amount: Decimal, currency: Optional[str] = None) -> str:
    currency = currency or settings.currency
    places = settings.currency_decimal_places
    return f"{currency} {amount:,.{places}f}"


def breakdown_lines(quote: PriceQuote, currency: Optional[str] = None) -> list[tuple[str, str]]:
    """Display rows of the price details panel."""
    nights_label = "night" if quote.nights == 1 else "nights"
    lines = [
        (
            f"{format_money(quote.nightly_rate, currency)} × {quote.nights} {nights_label}",
            format_money(quote.accommodation_cost, currency),
        )
    ]
    if quote.cleaning_fee > 0:
        lines.append(("Cleaning fee", format_money(quote.cleaning_fee, currency)))
    lines.append(("Service fee", format_money(quote.service_fee, currency)))
    lines.append(("Total", format_money(quote.total, currency)))
    return lines
