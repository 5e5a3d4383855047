"""Canvas and Todoist client implementations and factories."""

from tasklink.providers.canvas import CanvasClient
from tasklink.providers.factory import create_destination_client, create_source_client
from tasklink.providers.todoist import TodoistClient

__all__ = ["CanvasClient", "TodoistClient", "create_destination_client", "create_source_client"]
