import datetime
from typing import Optional

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from stay_calendar.core.messages import messages
from stay_calendar.domain.calendar import next_month, previous_month
from stay_calendar.domain.classifier import CalendarCell, DayStatus
from stay_calendar.domain.pricing import PriceQuote
from stay_calendar.domain.selection import CalendarState, Mode

MONTHS_EN = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

WEEK_DAYS = ["Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"]


def month_title(year: int, month: int) -> str:
    return f"{MONTHS_EN[month - 1]} {year}"


def human_date(value: datetime.date) -> str:
    return value.strftime("%a, %b %d, %Y")


def cell_label(cell: CalendarCell, today: datetime.date) -> str:
    if not cell.in_current_month:
        return " "

    day = str(cell.date.day)
    if cell.status == DayStatus.SELECTED:
        return f"🟢{day}"
    if cell.status == DayStatus.SELECTED_RANGE:
        return f"·{day}·"
    if cell.status == DayStatus.BLOCKED:
        return "🔒"
    if cell.status == DayStatus.BOOKED:
        return "✖️"
    if cell.status == DayStatus.DISABLED:
        return f"({day})"
    return day if cell.date != today else f"🔹 {day}"


def build_calendar_keyboard(
    state: CalendarState,
    cells: list[CalendarCell],
    mode: Mode,
    today: datetime.date,
    quote: Optional[PriceQuote] = None,
    prefix: str = "cal",
) -> InlineKeyboardMarkup:
    month = state.current_month
    keyboard: list[list[InlineKeyboardButton]] = []

    # 1. Title (tap to pick a month)
    keyboard.append(
        [
            InlineKeyboardButton(
                text=month_title(month.year, month.month),
                callback_data=f"{prefix}_pick_month:{month.year}",
            )
        ]
    )

    # 2. Week days
    keyboard.append(
        [InlineKeyboardButton(text=day, callback_data="ignore") for day in WEEK_DAYS]
    )

    # 3. Days, or a non-interactive placeholder while nothing authoritative is known
    if state.loading:
        keyboard.append(
            [InlineKeyboardButton(text=messages.LOADING, callback_data="ignore")]
        )
    elif state.unavailable:
        keyboard.append(
            [InlineKeyboardButton(text="🔄 Retry", callback_data=f"{prefix}_retry")]
        )
    else:
        row: list[InlineKeyboardButton] = []
        for cell in cells:
            callback_data = (
                f"{prefix}:{cell.date.isoformat()}" if cell.interactive else "ignore"
            )
            row.append(
                InlineKeyboardButton(text=cell_label(cell, today), callback_data=callback_data)
            )
            if len(row) == 7:
                keyboard.append(row)
                row = []

    # 4. Navigation
    prev_month = previous_month(month)
    following = next_month(month)
    keyboard.append(
        [
            InlineKeyboardButton(
                text="⬅️",
                callback_data=f"{prefix}_month:{prev_month.year}-{prev_month.month}",
            ),
            InlineKeyboardButton(
                text="➡️",
                callback_data=f"{prefix}_month:{following.year}-{following.month}",
            ),
        ]
    )

    # 5. Actions
    if mode is Mode.OWNER:
        if state.selection_start and state.is_interactive:
            keyboard.append(
                [
                    InlineKeyboardButton(text="🔒 Block dates", callback_data=f"{prefix}_block"),
                    InlineKeyboardButton(text="Clear", callback_data=f"{prefix}_clear"),
                ]
            )
        for block in state.blocked:
            keyboard.append(
                [
                    InlineKeyboardButton(
                        text=f"❌ Remove {block.start_date} → {block.end_date}",
                        callback_data=f"{prefix}_unblock:{block.id}",
                    )
                ]
            )
    elif state.has_completed_selection:
        actions = []
        if quote is not None:
            actions.append(
                InlineKeyboardButton(text="💳 Reserve", callback_data=f"{prefix}_reserve")
            )
        actions.append(InlineKeyboardButton(text="Clear", callback_data=f"{prefix}_clear"))
        keyboard.append(actions)

    return InlineKeyboardMarkup(inline_keyboard=keyboard)


def build_calendar_text(
    state: CalendarState,
    mode: Mode,
    quote: Optional[PriceQuote] = None,
) -> str:
    parts = [messages.CALENDAR_TITLE]

    if state.unavailable:
        parts.append(messages.UNAVAILABLE)
        return "\n\n".join(parts)

    start, end = state.selection_start, state.selection_end

    if mode is Mode.OWNER:
        if start:
            parts.append(
                messages.owner_selected(human_date(start), human_date(end) if end else None)
            )
        else:
            parts.append(messages.OWNER_STEP_START)
        parts.append(messages.owner_reason(state.reason))
        blocks = messages.blocks_list(state.blocked)
        if blocks:
            parts.append(blocks)
        return "\n\n".join(parts)

    if start is None:
        parts.append(messages.GUEST_STEP_CHECK_IN)
    elif end is None:
        parts.append(messages.guest_step_check_out(human_date(start)))
    else:
        parts.append(messages.stay_dates(human_date(start), human_date(end)))
        if quote is not None:
            parts.append(messages.price_details(quote))
            parts.append(messages.NOT_CHARGED_YET)
        else:
            parts.append(messages.PRICE_UNAVAILABLE)

    return "\n\n".join(parts)


def build_year_keyboard(
    year: int,
    current_month: datetime.date,
    prefix: str = "cal",
) -> InlineKeyboardMarkup:
    """Month picker; Cancel goes back to `current_month` as it was rendered."""
    keyboard = [
        [
            InlineKeyboardButton(text="⬅️", callback_data=f"{prefix}_pick_year:{year - 1}"),
            InlineKeyboardButton(text=str(year), callback_data="ignore"),
            InlineKeyboardButton(text="➡️", callback_data=f"{prefix}_pick_year:{year + 1}"),
        ]
    ]

    months = []
    for number, name in enumerate(MONTHS_EN, start=1):
        is_current = (year, number) == (current_month.year, current_month.month)
        months.append(
            InlineKeyboardButton(
                text=f"• {name[:3]}" if is_current else name[:3],
                callback_data=f"{prefix}_month:{year}-{number}",
            )
        )
    keyboard.extend(months[i:i + 3] for i in range(0, len(months), 3))

    keyboard.append([InlineKeyboardButton(text="🔙 Cancel", callback_data=f"{prefix}_back")])
    return InlineKeyboardMarkup(inline_keyboard=keyboard)
