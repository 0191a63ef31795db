"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from uuid import uuid4

from property_inspection.adapters.supabase_credentials_repository import (
    SupabaseCredentialsRepository,
)
from property_inspection.adapters.supabase_media_repository import (
    SupabaseMediaRepository,
)
from property_inspection.adapters.supabase_property_repository import (
    SupabasePropertyRepository,
)
from property_inspection.domain.properties import MEDIA_STATUS_COMPLETE, PropertyDraft
from property_inspection.domain.steps import MediaType


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    executed: list[str] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        self.executed.append(action)
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _property_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "token": "abc12345",
        "name": "Jane Owner",
        "address": "12 Oak Street",
        "city": "Springfield",
        "state": "IL",
        "zip": "62701",
        "bedrooms": 2,
        "bathrooms": None,
        "property_type": "Duplex",
        "has_pool": True,
        "media_status": "incomplete",
        "created_at": "2024-05-01T10:00:00+00:00",
    }
    row.update(overrides)
    return row


def _media_row(property_id: str, **overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "property_lead_id": property_id,
        "token": "abc12345",
        "step_id": "front-exterior",
        "step_title": "Front of Property",
        "file_name": "Front_of_Property.jpg",
        "file_url": "/uploads/x/Front_of_Property.jpg",
        "file_type": "photo",
        "file_size": "2048",
        "metadata": {"original_name": "a.jpg"},
    }
    row.update(overrides)
    return row


def test_property_repository_create_and_lookup() -> None:
    client = FakeSupabaseClient()
    table = client.table("property_leads")
    row = _property_row()
    table.queue("insert", [row])
    table.queue("select", [row])
    table.queue("select", [])

    repository = SupabasePropertyRepository(client)
    created = repository.create_property(
        PropertyDraft(name="Jane Owner", address="12 Oak Street", zip_code="62701"),
        "abc12345",
    )
    fetched = repository.get_by_token("abc12345")
    missing = repository.get_by_token("missing")

    assert str(created.id) == row["id"]
    assert created.zip_code == "62701"
    assert created.bathrooms is None
    assert created.has_pool
    assert created.created_at is not None
    assert table.last_payload["zip"] == "62701"  # type: ignore[index]
    assert table.last_payload["token"] == "abc12345"  # type: ignore[index]
    assert fetched is not None
    assert fetched.property_type == "Duplex"
    assert missing is None


def test_property_repository_update_status() -> None:
    client = FakeSupabaseClient()
    table = client.table("property_leads")
    row = _property_row(media_status=MEDIA_STATUS_COMPLETE)
    table.queue("update", [row])

    updated = SupabasePropertyRepository(client).update_status(
        uuid4(), MEDIA_STATUS_COMPLETE
    )

    assert updated.is_complete
    assert table.last_payload == {"media_status": MEDIA_STATUS_COMPLETE}


def test_property_repository_update_failure_raises() -> None:
    client = FakeSupabaseClient()

    try:
        SupabasePropertyRepository(client).update_drive_info(uuid4(), "f", "link")
    except RuntimeError as exc:
        assert "Failed to update property lead" in str(exc)
    else:
        raise AssertionError("Expected RuntimeError")


def test_property_repository_search_merges_columns() -> None:
    client = FakeSupabaseClient()
    table = client.table("property_leads")
    first = _property_row(token="tok00001")
    second = _property_row(token="tok00002")
    table.queue("select", [first])
    table.queue("select", [first, second])
    table.queue("select", [])
    table.queue("select", [])

    results = SupabasePropertyRepository(client).search("oak", 10)

    assert [record.token for record in results] == ["tok00001", "tok00002"]
    assert ("name", "%oak%") in table.last_filters
    assert ("state", "%oak%") in table.last_filters


def test_media_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("property_media")
    property_id = uuid4()
    row = _media_row(str(property_id))
    table.queue("insert", [row])
    table.queue("select", [row, _media_row(str(property_id), file_type="video")])

    repository = SupabaseMediaRepository(client)
    created = repository.create_media(
        property_id=property_id,
        token="abc12345",
        step_id="front-exterior",
        step_title="Front of Property",
        file_name="Front_of_Property.jpg",
        file_url="/uploads/x/Front_of_Property.jpg",
        file_type=MediaType.PHOTO,
        local_path="/data/x/Front_of_Property.jpg",
        file_size=2048,
        mime_type="image/jpeg",
        drive_file_id=None,
        is_synced_to_drive=False,
        metadata={"original_name": "a.jpg"},
    )
    listed = repository.list_by_property(property_id)

    assert created.property_id == property_id
    assert created.file_size == 2048
    assert table.last_payload["file_type"] == "photo"  # type: ignore[index]
    assert [item.file_type for item in listed] == [MediaType.PHOTO, MediaType.VIDEO]


def test_media_repository_count_and_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("property_media")
    property_id = uuid4()
    table.queue("select", [{"id": "1"}, {"id": "2"}])
    table.queue("select", [])

    repository = SupabaseMediaRepository(client)

    assert repository.count_by_property(property_id) == 2
    assert repository.get_media(uuid4()) is None
    repository.delete_by_property(property_id)
    assert table.executed[-1] == "delete"
    assert ("property_lead_id", str(property_id)) in table.last_filters


def test_credentials_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("drive_credentials")
    table.queue("select", [{"access_token": "access", "refresh_token": "refresh"}])
    table.queue("select", [{"access_token": None}])

    repository = SupabaseCredentialsRepository(client)
    credentials = repository.get_owner_credentials()

    assert credentials is not None
    assert credentials.access_token == "access"
    assert credentials.refresh_token == "refresh"
    assert repository.get_owner_credentials() is None
    assert repository.get_owner_credentials() is None
