"""
Table-change notifications.

One blinker signal per entity type (table name). Services publish after a
write commits; subscribers receive a ChangeEvent. This is the in-process
replacement for realtime table subscriptions.
"""

from dataclasses import dataclass, field
from typing import Optional

from blinker import Namespace
from flask import current_app, has_app_context

from gymapp.timeutils import utcnow

INSERT = 'INSERT'
UPDATE = 'UPDATE'
DELETE = 'DELETE'
EVENT_TYPES = (INSERT, UPDATE, DELETE)

_signals = Namespace()


@dataclass
class ChangeEvent:
    entity: str
    event_type: str
    new: Optional[dict] = None
    old: Optional[dict] = None
    occurred_at: object = field(default_factory=utcnow)


def channel(entity: str):
    """Return the signal for an entity type, creating it on first use."""
    return _signals.signal(f'table-changes:{entity}')


def subscribe(entity: str, handler, event_type: str = '*'):
    """
    Register handler(event) for changes to entity.

    event_type filters to INSERT, UPDATE or DELETE; '*' receives all.
    Returns the receiver actually connected so it can be passed to
    unsubscribe().
    """
    if event_type != '*' and event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {event_type}")

    def receiver(sender, event):
        if event_type == '*' or event.event_type == event_type:
            handler(event)

    # Strong reference: closures would otherwise be collected immediately
    channel(entity).connect(receiver, weak=False)
    return receiver


def unsubscribe(entity: str, receiver):
    channel(entity).disconnect(receiver)


def publish(entity: str, event_type: str, new=None, old=None) -> ChangeEvent:
    """Notify subscribers of a committed change."""
    event = ChangeEvent(entity=entity, event_type=event_type, new=new, old=old)
    if has_app_context():
        current_app.logger.debug(f"event {entity} {event_type}")
    channel(entity).send(entity, event=event)
    return event
