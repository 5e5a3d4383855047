from __future__ import annotations

from tasklink.contracts.records import CanvasAccount, TodoistAccount
from tasklink.providers import CanvasClient, TodoistClient, create_destination_client, create_source_client


def test_create_source_client_uses_account() -> None:
    account = CanvasAccount(user_id="u", base_url="https://canvas.test/", access_token="tok")
    client = create_source_client(account, max_retries=5)

    assert isinstance(client, CanvasClient)
    assert client._base_url == "https://canvas.test"
    assert client._token == "tok"
    assert client._max_retries == 5


def test_create_destination_client_uses_account_and_base() -> None:
    account = TodoistAccount(user_id="u", access_token="tok")
    client = create_destination_client(account, base_url="https://todoist.test/rest/v2")

    assert isinstance(client, TodoistClient)
    assert client._base_url == "https://todoist.test/rest/v2"
    assert client._token == "tok"
