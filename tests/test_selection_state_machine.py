from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from object_access_app.core.models import NO_FIELD_OPTION, SelectableOption  # noqa: E402
from object_access_app.inspector import (  # noqa: E402
    AccessInspector,
    FieldSelected,
    InspectorState,
    ObjectSelected,
    SubmitClicked,
    UserSelected,
)


def test_new_inspector_starts_empty(make_backend) -> None:
    backend = make_backend()
    inspector = AccessInspector(backend, backend)

    assert inspector.state is InspectorState.EMPTY
    assert inspector.selection.object_name is None
    assert inspector.selection.field_name is None
    assert inspector.selection.user_id is None
    assert inspector.field_options == [NO_FIELD_OPTION]
    assert inspector.result_set is None
    assert backend.calls == []


def test_load_populates_objects_and_users_independently(make_backend) -> None:
    backend = make_backend(
        objects=["Account", "Contact"],
        users=[{"Id": "005A", "Name": "Ada Admin"}, {"Id": "005B", "Name": "Sam Sales"}],
    )
    inspector = AccessInspector(backend, backend)

    asyncio.run(inspector.load())

    assert inspector.object_options == [
        SelectableOption(label="Account", value="Account"),
        SelectableOption(label="Contact", value="Contact"),
    ]
    assert inspector.user_options == [
        SelectableOption(label="Ada Admin", value="005A"),
        SelectableOption(label="Sam Sales", value="005B"),
    ]


def test_object_list_failure_leaves_user_list_loaded(make_backend, caplog: pytest.LogCaptureFixture) -> None:
    backend = make_backend(fail={"list_objects"})
    inspector = AccessInspector(backend, backend)

    with caplog.at_level("WARNING", logger="object_access_app.inspector"):
        asyncio.run(inspector.load())

    assert inspector.object_options == []
    assert [option.value for option in inspector.user_options] == ["005"]
    assert "list_objects" in caplog.text


def test_selecting_object_prefixes_sentinel_to_field_list(make_backend) -> None:
    fields = [
        {"Name": "Name", "Label": "Account Name"},
        {"Name": "Industry", "Label": "Industry"},
        {"Name": "AnnualRevenue", "Label": "Annual Revenue"},
    ]
    backend = make_backend(fields={"Account": fields})
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        await inspector.set_object("Account")

    asyncio.run(scenario())

    assert inspector.state is InspectorState.OBJECT_CHOSEN
    assert len(inspector.field_options) == len(fields) + 1
    assert inspector.field_options[0] == SelectableOption(label="---Select Field---", value="")
    assert inspector.field_options[1:] == [
        SelectableOption(label="Account Name", value="Name"),
        SelectableOption(label="Industry", value="Industry"),
        SelectableOption(label="Annual Revenue", value="AnnualRevenue"),
    ]


@pytest.mark.parametrize("prior_field", ["Name", "", None])
def test_changing_object_always_clears_field(make_backend, prior_field) -> None:
    backend = make_backend(fields={"Account": [{"Name": "Name", "Label": "Name"}], "Contact": []})
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        await inspector.set_object("Account")
        inspector.set_field(prior_field)
        await inspector.set_object("Contact")

    asyncio.run(scenario())

    assert inspector.selection.object_name == "Contact"
    assert inspector.selection.field_name is None
    assert inspector.state is InspectorState.OBJECT_CHOSEN
    assert inspector.field_options == [NO_FIELD_OPTION]


def test_selecting_same_object_twice_repeats_only_the_field_request(make_backend) -> None:
    backend = make_backend()
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        await inspector.set_object("Account")
        inspector.set_field("Name")
        await inspector.set_object("Account")

    asyncio.run(scenario())

    assert backend.calls == [("list_fields", "Account"), ("list_fields", "Account")]
    assert inspector.selection.field_name is None
    assert [option.value for option in inspector.field_options] == ["", "Name"]


@pytest.mark.parametrize("cleared_value", ["", None])
def test_clearing_object_returns_to_empty_and_drops_results(make_backend, cleared_value) -> None:
    backend = make_backend()
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        await inspector.set_object("Account")
        inspector.set_user("005")
        await inspector.submit()
        assert inspector.result_set
        assert inspector.set_object(cleared_value) is None

    asyncio.run(scenario())

    assert inspector.state is InspectorState.EMPTY
    assert inspector.selection.object_name is None
    assert inspector.selection.field_name is None
    assert inspector.selection.user_id == "005"
    assert inspector.field_options == [NO_FIELD_OPTION]
    assert inspector.result_set is None
    assert inspector.table().is_empty


def test_field_selection_moves_between_object_and_field_states(make_backend) -> None:
    backend = make_backend()
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        await inspector.set_object("Account")

    asyncio.run(scenario())
    inspector.set_field("Name")
    assert inspector.state is InspectorState.FIELD_CHOSEN
    assert inspector.selection.field_name == "Name"

    inspector.set_field("")
    assert inspector.state is InspectorState.OBJECT_CHOSEN
    assert inspector.selection.field_name == ""


def test_field_and_user_selection_have_no_backend_side_effects(make_backend) -> None:
    backend = make_backend()
    inspector = AccessInspector(backend, backend)

    inspector.set_field("Name")
    inspector.set_user("005")

    assert backend.calls == []
    assert inspector.state is InspectorState.EMPTY
    assert inspector.selection.user_id == "005"


def test_field_list_failure_keeps_sentinel_only(make_backend) -> None:
    backend = make_backend(fail={"list_fields"})
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        await inspector.set_object("Account")

    asyncio.run(scenario())

    assert inspector.selection.object_name == "Account"
    assert inspector.field_options == [NO_FIELD_OPTION]


def test_stale_field_list_is_discarded(make_backend) -> None:
    backend = make_backend(
        fields={
            "Account": [{"Name": "Name", "Label": "Name"}],
            "Contact": [{"Name": "Email", "Label": "Email"}],
        }
    )
    release = {"Account": None}
    original = backend.list_fields

    async def slow_list_fields(object_name: str):
        if object_name == "Account":
            await release["Account"].wait()
        return await original(object_name)

    backend.list_fields = slow_list_fields
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        release["Account"] = asyncio.Event()
        first = inspector.set_object("Account")
        second = inspector.set_object("Contact")
        await second
        release["Account"].set()
        await first

    asyncio.run(scenario())

    assert inspector.selection.object_name == "Contact"
    assert [option.value for option in inspector.field_options] == ["", "Email"]


def test_handle_routes_each_event_kind(make_backend) -> None:
    backend = make_backend()
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        await inspector.handle(ObjectSelected("Account"))
        assert inspector.handle(FieldSelected("Name")) is None
        assert inspector.handle(UserSelected("005")) is None
        await inspector.handle(SubmitClicked())

    asyncio.run(scenario())

    assert backend.calls_for("query_field_access") == [("query_field_access", "Account", "Name", "005")]


def test_handle_rejects_unknown_events(make_backend) -> None:
    backend = make_backend()
    inspector = AccessInspector(backend, backend)

    with pytest.raises(TypeError):
        inspector.handle("submit")


def test_consume_applies_queued_events_in_order(make_backend) -> None:
    backend = make_backend()
    inspector = AccessInspector(backend, backend)

    async def scenario() -> None:
        queue: asyncio.Queue = asyncio.Queue()
        for event in (ObjectSelected("Account"), UserSelected("005"), SubmitClicked(), None):
            queue.put_nowait(event)
        await inspector.consume(queue)
        await inspector.wait_idle()

    asyncio.run(scenario())

    assert backend.calls == [
        ("list_fields", "Account"),
        ("query_object_access", "Account", "005"),
    ]
    assert inspector.result_set == backend.object_rows
