"""
Calendar handlers: guests pick a stay, owners block dates
"""
import datetime
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional

import requests
from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message

from stay_calendar.core.messages import messages
from stay_calendar.domain.intervals import DateRange, parse_date
from stay_calendar.domain.pricing import PricingTerms, format_money
from stay_calendar.domain.selection import Mode
from stay_calendar.schemas.availability import BookingRequest
from stay_calendar.services.calendar_service import CalendarSession
from stay_calendar.telegram.state.calendar import (
    calendar_sessions,
    drop_session,
    replace_session,
)
from stay_calendar.telegram.ui.calendar import (
    build_calendar_keyboard,
    build_calendar_text,
    build_year_keyboard,
)

router = Router()
logger = logging.getLogger(__name__)

PREFIX = "cal"

SUBMISSION_ERRORS = (requests.exceptions.RequestException, ValueError, PermissionError)


def render(session: CalendarSession) -> tuple[str, InlineKeyboardMarkup]:
    quote = session.quote()
    text = build_calendar_text(session.state, session.mode, quote)
    keyboard = build_calendar_keyboard(
        session.state,
        session.cells(),
        session.mode,
        session.today(),
        quote=quote,
        prefix=PREFIX,
    )
    return text, keyboard


def parse_terms(args: list[str]) -> Optional[PricingTerms]:
    """`<price_per_night> [cleaning_fee] [service_fee]` from command arguments"""
    if not args:
        return None
    try:
        values = [Decimal(a) for a in args[:3]]
    except InvalidOperation:
        return None
    if any(v < 0 for v in values):
        return None
    price_per_night = values[0]
    cleaning_fee = values[1] if len(values) > 1 else Decimal("0")
    service_fee = values[2] if len(values) > 2 else None
    return PricingTerms(price_per_night, cleaning_fee, service_fee)


def booking_hand_off(message: Message):
    async def hand_off(request: BookingRequest) -> None:
        await message.answer(
            messages.booking_requested(
                request.check_in.isoformat(),
                request.check_out.isoformat(),
                request.nights,
                format_money(request.total_price, request.currency),
            )
        )

    return hand_off


async def open_calendar(message: Message, command: CommandObject, mode: Mode) -> None:
    if message.from_user is None:
        return

    args = (command.args or "").split()
    if not args:
        await message.answer(f"Usage: /{command.command} &lt;property_id&gt;")
        return

    session = CalendarSession(
        property_id=args[0],
        mode=mode,
        terms=parse_terms(args[1:]) if mode is Mode.GUEST else None,
        on_booking_request=booking_hand_off(message),
    )
    replace_session(message.from_user.id, session)

    await session.open()
    text, keyboard = render(session)
    await message.answer(text, reply_markup=keyboard)


@router.message(Command("calendar"))
async def calendar_command(message: Message, command: CommandObject):
    """/calendar <property_id> [price_per_night] [cleaning_fee] [service_fee]"""
    await open_calendar(message, command, Mode.GUEST)


@router.message(Command("block"))
async def block_command(message: Message, command: CommandObject):
    """/block <property_id>"""
    await open_calendar(message, command, Mode.OWNER)


@router.message(Command("reason"))
async def reason_command(message: Message, command: CommandObject):
    if message.from_user is None:
        return

    session = calendar_sessions.get(message.from_user.id)
    if session is None or session.mode is not Mode.OWNER:
        await message.answer(messages.SESSION_EXPIRED)
        return

    session.set_reason(command.args or "")
    text, keyboard = render(session)
    await message.answer(text, reply_markup=keyboard)


@router.message(Command("close"))
async def close_command(message: Message):
    if message.from_user is None:
        return

    drop_session(message.from_user.id)
    await message.answer(messages.CALENDAR_CLOSED)


async def _session_for(callback: CallbackQuery) -> Optional[CalendarSession]:
    if callback.from_user is None or callback.message is None:
        return None
    session = calendar_sessions.get(callback.from_user.id)
    if session is None:
        await callback.answer(messages.SESSION_EXPIRED, show_alert=True)
    return session


async def _redraw(callback: CallbackQuery, session: CalendarSession) -> None:
    text, keyboard = render(session)
    await callback.message.edit_text(text, reply_markup=keyboard)
    await callback.answer()


@router.callback_query(F.data == "ignore")
async def ignore_callback(callback: CallbackQuery):
    """Inert cells: week days, padding, past and unavailable days"""
    await callback.answer()


@router.callback_query(F.data.startswith(f"{PREFIX}:"))
async def select_day(callback: CallbackQuery):
    session = await _session_for(callback)
    if session is None:
        return

    _, date_str = callback.data.split(":")
    try:
        day = parse_date(date_str)
    except ValueError:
        await callback.answer()
        return

    before = session.state
    session.click_day(day)
    if session.state == before:
        await callback.answer()
        return

    await _redraw(callback, session)


@router.callback_query(F.data.startswith(f"{PREFIX}_month:"))
async def change_month(callback: CallbackQuery):
    session = await _session_for(callback)
    if session is None:
        return

    _, value = callback.data.split(":")
    year, month = map(int, value.split("-"))

    await session.go_to_month(datetime.date(year, month, 1))
    await _redraw(callback, session)


@router.callback_query(
    F.data.startswith(f"{PREFIX}_pick_month:") | F.data.startswith(f"{PREFIX}_pick_year:")
)
async def show_month_picker(callback: CallbackQuery):
    session = await _session_for(callback)
    if session is None:
        return

    _, year = callback.data.split(":")
    await callback.message.edit_text(
        f"📅 <b>Select a month ({year})</b>",
        reply_markup=build_year_keyboard(int(year), session.state.current_month, prefix=PREFIX),
    )
    await callback.answer()


@router.callback_query(F.data == f"{PREFIX}_back")
async def back_to_calendar(callback: CallbackQuery):
    """Leave the month picker without reloading availability"""
    session = await _session_for(callback)
    if session is None:
        return

    await _redraw(callback, session)


@router.callback_query(F.data == f"{PREFIX}_retry")
async def retry_load(callback: CallbackQuery):
    session = await _session_for(callback)
    if session is None:
        return

    await session.retry()
    await _redraw(callback, session)


@router.callback_query(F.data == f"{PREFIX}_clear")
async def clear_selection(callback: CallbackQuery):
    session = await _session_for(callback)
    if session is None:
        return

    session.clear()
    await _redraw(callback, session)


@router.callback_query(F.data == f"{PREFIX}_block")
async def block_selected(callback: CallbackQuery):
    session = await _session_for(callback)
    if session is None:
        return

    try:
        block = await session.block_selected()
    except SUBMISSION_ERRORS as e:
        logger.error(f"Failed to block dates: {e}")
        await callback.answer(messages.ACTION_FAILED, show_alert=True)
        return

    text, keyboard = render(session)
    await callback.message.edit_text(text, reply_markup=keyboard)
    await callback.answer(messages.block_created(DateRange(block.start_date, block.end_date)))


@router.callback_query(F.data.startswith(f"{PREFIX}_unblock:"))
async def remove_block(callback: CallbackQuery):
    session = await _session_for(callback)
    if session is None:
        return

    _, block_id = callback.data.split(":", 1)
    try:
        await session.remove_block(block_id)
    except SUBMISSION_ERRORS as e:
        logger.error(f"Failed to remove block {block_id}: {e}")
        await callback.answer(messages.ACTION_FAILED, show_alert=True)
        return

    await _redraw(callback, session)


@router.callback_query(F.data == f"{PREFIX}_reserve")
async def reserve(callback: CallbackQuery):
    session = await _session_for(callback)
    if session is None:
        return

    try:
        await session.request_booking()
    except SUBMISSION_ERRORS as e:
        logger.error(f"Booking request failed: {e}")
        await callback.answer(messages.ACTION_FAILED, show_alert=True)
        return

    await _redraw(callback, session)
