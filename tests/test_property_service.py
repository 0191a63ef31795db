"""Tests for property service."""

import pytest

from property_inspection.domain.drive import DriveCredentials
from property_inspection.domain.errors import PropertyNotFoundError
from property_inspection.domain.properties import MEDIA_STATUS_COMPLETE, PropertyDraft
from property_inspection.services.properties import (
    PropertyService,
    display_address,
    full_address,
)
from tests.conftest import (
    FakeCredentialsRepository,
    FakeDriveMirror,
    InMemoryPropertyRepository,
    make_property,
)

DRAFT = PropertyDraft(
    name="Jane Owner",
    address="12 Oak Street",
    city="Springfield",
    state="IL",
    zip_code="62701",
)


def test_create_property_assigns_short_token(property_service: PropertyService) -> None:
    record = property_service.create_property(DRAFT)

    assert len(record.token) == 8
    int(record.token, 16)
    assert record.drive_folder_id is None
    assert not record.is_complete


def test_create_property_prepares_mirror_folder(
    property_service: PropertyService,
    mirror: FakeDriveMirror,
    credentials_repository: FakeCredentialsRepository,
) -> None:
    credentials_repository.credentials = DriveCredentials(access_token="token")

    record = property_service.create_property(DRAFT)

    assert mirror.folder_paths == [
        ["Property Photos", "12 Oak Street, Springfield, IL"]
    ]
    assert record.drive_folder_id == "folder-1"
    assert record.drive_share_link == "https://drive.google.com/drive/folders/folder-1"


def test_mirror_failure_does_not_block_creation(
    property_service: PropertyService,
    mirror: FakeDriveMirror,
    credentials_repository: FakeCredentialsRepository,
    property_repository: InMemoryPropertyRepository,
) -> None:
    credentials_repository.credentials = DriveCredentials(access_token="token")
    mirror.fail_folders = True

    record = property_service.create_property(DRAFT)

    assert record.drive_folder_id is None
    assert property_repository.get_by_token(record.token) is not None


def test_get_by_token_and_mark_complete(
    property_service: PropertyService, property_repository: InMemoryPropertyRepository
) -> None:
    property_repository.add(make_property("tok00001"))

    with pytest.raises(PropertyNotFoundError):
        property_service.get_by_token("missing")

    updated = property_service.mark_complete("tok00001")

    assert updated.media_status == MEDIA_STATUS_COMPLETE
    assert property_service.get_by_token("tok00001").is_complete


def test_search_requires_two_characters_and_is_limited(
    property_service: PropertyService, property_repository: InMemoryPropertyRepository
) -> None:
    for index in range(12):
        property_repository.add(make_property(f"tok{index:05d}", address=f"{index} Oak Ave"))
    property_repository.add(make_property("tokelm00", address="1 Elm Road"))

    assert property_service.search("o") == []
    assert len(property_service.search(" oak ")) == 10
    assert [record.token for record in property_service.search("elm")] == ["tokelm00"]


def test_steps_for_uses_defaults_and_features(
    property_service: PropertyService, property_repository: InMemoryPropertyRepository
) -> None:
    property_repository.add(
        make_property(
            "tok00002", bedrooms=None, bathrooms=None, has_garage=True, notes="Dock"
        )
    )

    ids = [step.id for step in property_service.steps_for("tok00002")]

    assert "bedroom-3-wide" in ids
    assert "bathroom-3-wide" not in ids
    assert "garage-storage" in ids
    assert "special-feature-1" in ids


def test_without_mirror_no_credentials_are_read() -> None:
    service = PropertyService(repository=InMemoryPropertyRepository())

    assert service.owner_credentials() is None
    assert service.create_property(DRAFT).drive_folder_id is None


def test_address_formatting() -> None:
    record = make_property(city=None)

    assert display_address(record) == "12 Oak Street, IL"
    assert full_address(make_property()) == "12 Oak Street, Springfield, IL 62701"
