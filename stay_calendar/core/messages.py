from typing import Optional

from aiogram.utils.text_decorations import html_decoration

from stay_calendar.domain.intervals import DateRange
from stay_calendar.domain.pricing import PriceQuote, breakdown_lines


class Messages:
    """
    Centralized store for user-facing messages.
    """

    @property
    def CALENDAR_TITLE(self) -> str:
        return "📅 <b>Availability Calendar</b>"

    @property
    def LOADING(self) -> str:
        return "⏳ Loading availability..."

    @property
    def UNAVAILABLE(self) -> str:
        return (
            "⚠️ <b>Availability could not be loaded.</b>\n\n"
            "Dates cannot be selected right now. Please try again."
        )

    @property
    def GUEST_STEP_CHECK_IN(self) -> str:
        return (
            "<b>Step 1:</b> Tap an available date to select your <b>check-in</b> date.\n"
            "Minimum stay: 1 night"
        )

    @property
    def OWNER_STEP_START(self) -> str:
        return "Select a start date, then an end date"

    @property
    def PRICE_UNAVAILABLE(self) -> str:
        return "Price not available. Contact the host for pricing."

    @property
    def NOT_CHARGED_YET(self) -> str:
        return "You won't be charged yet"

    @property
    def SESSION_EXPIRED(self) -> str:
        return "Calendar session expired, open it again"

    @property
    def CALENDAR_CLOSED(self) -> str:
        return "Calendar closed"

    @property
    def ACTION_FAILED(self) -> str:
        return "❌ Something went wrong. Your dates are kept, please try again."

    def guest_step_check_out(self, check_in: str) -> str:
        return (
            f"Check-in: <b>{check_in}</b>\n\n"
            f"<b>Step 2:</b> Now tap a <b>later date</b> to select your check-out.\n"
            f"Check-out must be at least 1 day after check-in"
        )

    def owner_selected(self, start: str, end: Optional[str]) -> str:
        return f"Selected: {start} → {end}" if end else f"Selected: {start}"

    def owner_reason(self, reason: str) -> str:
        if not reason:
            return "Send /reason &lt;text&gt; to add a reason (optional)"
        return f"Reason: <i>{html_decoration.quote(reason)}</i>"

    def stay_dates(self, check_in: str, check_out: str) -> str:
        return f"Check-in: <b>{check_in}</b>\nCheck-out: <b>{check_out}</b>"

    def price_details(self, quote: PriceQuote, currency: Optional[str] = None) -> str:
        rows = breakdown_lines(quote, currency)
        *items, (total_label, total_value) = rows
        text = "<b>Price Details</b>\n"
        for label, value in items:
            text += f"{label}: {value}\n"
        text += f"──────────────────\n<b>{total_label}: {total_value}</b>"
        return text

    def blocks_list(self, blocks) -> str:
        if not blocks:
            return ""
        text = "🔒 <b>Blocked dates</b>\n"
        for block in blocks:
            line = f"• {DateRange(block.start_date, block.end_date)}"
            if block.reason:
                line += f" ({html_decoration.quote(block.reason)})"
            text += line + "\n"
        return text

    def block_created(self, date_range: DateRange) -> str:
        return f"🔒 Blocked {date_range}"

    def booking_requested(self, check_in: str, check_out: str, nights: int, total: str) -> str:
        return (
            f"✅ <b>Booking request sent</b>\n\n"
            f"📅 {check_in} — {check_out}\n"
            f"🌙 Nights: {nights}\n"
            f"💳 Total: {total}"
        )


messages = Messages()
