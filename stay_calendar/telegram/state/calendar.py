from stay_calendar.services.calendar_service import CalendarSession

# user_id -> open calendar session
calendar_sessions: dict[int, CalendarSession] = {}


def replace_session(user_id: int, session: CalendarSession) -> None:
    """Register a new session, dropping in-flight loads of the previous one."""
    previous = calendar_sessions.get(user_id)
    if previous is not None:
        previous.close()
    calendar_sessions[user_id] = session


def drop_session(user_id: int) -> None:
    session = calendar_sessions.pop(user_id, None)
    if session is not None:
        session.close()
