"""Process wiring: the recorder and the deriver listen on every topic."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inventory_api.config import Settings
from inventory_api.events.dispatcher import EventDispatcher
from inventory_api.events.topics import Topic
from inventory_api.services.activity_recorder import ActivityRecorder
from inventory_api.services.alert_deriver import AlertDeriver


def wire_subscribers(dispatcher: EventDispatcher, recorder: ActivityRecorder, deriver: AlertDeriver) -> None:
    for topic in Topic:
        dispatcher.subscribe(topic, recorder.handle)
        dispatcher.subscribe(topic, deriver.handle)


def build_dispatcher(session_factory: async_sessionmaker[AsyncSession], settings: Settings) -> EventDispatcher:
    dispatcher = EventDispatcher()
    wire_subscribers(
        dispatcher,
        ActivityRecorder(session_factory),
        AlertDeriver(session_factory, settings),
    )
    return dispatcher
