from inventory_api.events.dispatcher import EventDispatcher
from inventory_api.events.topics import Topic

__all__ = ["EventDispatcher", "Topic"]
