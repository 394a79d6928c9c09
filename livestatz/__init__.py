"""
LiveStatz core: calendar invites, RSVPs and weekly engagement reports.
Platform-agnostic; used by the web API or any other interface.
"""

# Database (SQLAlchemy)
from .database import get_connection, get_transaction, get_engine, close_engine

# Calendar documents and provider links
from .calendar import CalendarEvent, Organizer, generate_ics, generate_calendar_links

# Invite delivery
from .invites import CalendarInviteSender, HttpInviteTransport

# RSVPs and reports (async methods - must be awaited)
from .rsvps import RsvpCache, RsvpStore
from .reports import WeeklyFanReport, WeeklyFanReporter, week_window

from .results import Result
from .users import CurrentUser

__all__ = [
    # Database (SQLAlchemy)
    'get_connection', 'get_transaction', 'get_engine', 'close_engine',
    # Calendar
    'CalendarEvent', 'Organizer', 'generate_ics', 'generate_calendar_links',
    # Invites
    'CalendarInviteSender', 'HttpInviteTransport',
    # RSVPs / reports
    'RsvpCache', 'RsvpStore', 'WeeklyFanReport', 'WeeklyFanReporter', 'week_window',
    'Result', 'CurrentUser',
]
