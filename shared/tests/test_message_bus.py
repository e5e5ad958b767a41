"""Tests for the in-process message bus."""

from dataclasses import dataclass
from unittest import mock

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class SomethingHappened(DomainEvent):
    detail: str


def test_handlers_receive_events_once():
    bus = MessageBus()
    handler = mock.Mock(__name__='handler')
    bus.register_event_handler(SomethingHappened, handler)
    bus.register_event_handler(SomethingHappened, handler)

    event = SomethingHappened(detail='x')
    bus.publish_events([event])

    handler.assert_called_once_with(event)


def test_failing_handler_does_not_stop_others():
    bus = MessageBus()
    failing = mock.Mock(__name__='failing', side_effect=RuntimeError('boom'))
    healthy = mock.Mock(__name__='healthy')
    bus.register_event_handler(SomethingHappened, failing)
    bus.register_event_handler(SomethingHappened, healthy)

    bus.publish_events([SomethingHappened(detail='y')])

    healthy.assert_called_once()


def test_event_to_dict():
    event = SomethingHappened(aggregate_id=7, detail='z')

    data = event.to_dict()

    assert data['event_type'] == 'SomethingHappened'
    assert data['aggregate_id'] == 7
