"""
Unit tests for location management.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from academy.core.exceptions import BadRequestError
from academy.core.validation import MissingFieldsError
from academy.modules.locations.models import Location
from academy.modules.locations.schemas import LocationPayload
from academy.modules.locations.service import (
    InactiveLocationError,
    LocationInUseError,
    LocationNotFoundError,
    RoomNotFoundError,
    create_location,
    deactivate_location,
    ensure_room,
    get_active_location,
    normalize_rooms,
    update_location,
)


async def _apply(db, location, **fields):
    for name, value in fields.items():
        setattr(location, name, value)
    return location


@pytest.fixture
def location():
    return Location(
        id=str(uuid4()),
        name="Richmond Studio",
        address_line1="1 Swan St",
        suburb="Richmond",
        city="Melbourne",
        state="VIC",
        country="Australia",
        postcode="3121",
        rooms=["Room A", "Room B"],
        is_active=True,
    )


@pytest.fixture
def mock_repo():
    with patch("academy.modules.locations.service.repository") as repo:
        repo.create = AsyncMock(side_effect=lambda db, **fields: Location(**fields))
        repo.update = AsyncMock(side_effect=_apply)
        repo.get_by_id = AsyncMock(return_value=None)
        repo.count_active_events = AsyncMock(return_value=0)
        yield repo


class TestRooms:
    def test_normalize_trims_and_dedupes(self):
        assert normalize_rooms([" Room A ", "Room B", "", "Room A"]) == ["Room A", "Room B"]

    def test_normalize_requires_list(self):
        with pytest.raises(BadRequestError):
            normalize_rooms("Room A")

    def test_ensure_room(self, location):
        ensure_room(location, "Room B")
        with pytest.raises(RoomNotFoundError):
            ensure_room(location, "Hall")


class TestCreateLocation:
    @pytest.mark.asyncio
    async def test_defaults(self, mock_db, mock_repo, admin_user):
        payload = LocationPayload(
            name="Carlton Hall",
            address_line1="10 Lygon St",
            suburb="Carlton",
            city="Melbourne",
            state="VIC",
            postcode="3053",
            rooms=["Main", "Main", " Side "],
        )

        location = await create_location(mock_db, payload, admin_user)

        assert location.country == "Australia"
        assert location.rooms == ["Main", "Side"]
        assert location.is_active is True
        assert location.created_by == admin_user.id

    @pytest.mark.asyncio
    async def test_missing_address(self, mock_db, mock_repo, admin_user):
        with pytest.raises(MissingFieldsError) as exc_info:
            await create_location(mock_db, LocationPayload(name="Somewhere"), admin_user)

        assert exc_info.value.missing_fields == [
            "addressLine1",
            "suburb",
            "city",
            "state",
            "postcode",
        ]
        mock_repo.create.assert_not_called()


class TestActiveLocation:
    @pytest.mark.asyncio
    async def test_unknown(self, mock_db, mock_repo):
        with pytest.raises(LocationNotFoundError):
            await get_active_location(mock_db, str(uuid4()))

    @pytest.mark.asyncio
    async def test_inactive(self, mock_db, mock_repo, location):
        location.is_active = False
        mock_repo.get_by_id.return_value = location

        with pytest.raises(InactiveLocationError):
            await get_active_location(mock_db, location.id)


class TestDeactivateLocation:
    @pytest.mark.asyncio
    async def test_blocked_by_active_events(self, mock_db, mock_repo, location, admin_user):
        mock_repo.get_by_id.return_value = location
        mock_repo.count_active_events.return_value = 2

        with pytest.raises(LocationInUseError) as exc_info:
            await deactivate_location(mock_db, location.id, admin_user)

        assert exc_info.value.status_code == 409
        assert location.is_active is True
        mock_repo.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_deactivates_when_free(self, mock_db, mock_repo, location, admin_user):
        mock_repo.get_by_id.return_value = location

        result = await deactivate_location(mock_db, location.id, admin_user)

        assert result.is_active is False
        assert result.updated_by == admin_user.id

    @pytest.mark.asyncio
    async def test_update_to_inactive_applies_same_rule(
        self, mock_db, mock_repo, location, admin_user
    ):
        mock_repo.get_by_id.return_value = location
        mock_repo.count_active_events.return_value = 1

        with pytest.raises(LocationInUseError):
            await update_location(
                mock_db, location.id, LocationPayload(is_active=False), admin_user
            )

    @pytest.mark.asyncio
    async def test_update_cannot_blank_required_field(
        self, mock_db, mock_repo, location, admin_user
    ):
        mock_repo.get_by_id.return_value = location

        with pytest.raises(MissingFieldsError):
            await update_location(mock_db, location.id, LocationPayload(city=""), admin_user)


