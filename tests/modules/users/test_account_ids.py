"""
Unit tests for account identifier generation.
"""

from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest

from academy.modules.users.account_ids import (
    AccountIdCorruptedError,
    format_account_id,
    generate_next_account_id,
    next_account_id,
)


class TestNextAccountId:
    def test_first_id(self):
        assert next_account_id(None) == "APS001"

    @pytest.mark.parametrize(
        ("latest", "expected"),
        [("APS001", "APS002"), ("APS009", "APS010"), ("APS099", "APS100"), ("APS999", "APS1000")],
    )
    def test_increments_and_pads(self, latest, expected):
        assert next_account_id(latest) == expected

    def test_grows_past_padding(self):
        assert next_account_id("APS1000") == "APS1001"

    @pytest.mark.parametrize("latest", ["APSabc", "APS12x", "APS"])
    def test_corrupted_suffix(self, latest):
        with pytest.raises(AccountIdCorruptedError) as exc_info:
            next_account_id(latest)
        assert exc_info.value.status_code == 500

    def test_format(self):
        assert format_account_id(7) == "APS007"


class TestGenerateNextAccountId:
    @pytest.mark.asyncio
    async def test_locks_before_reading_latest(self, mock_db):
        manager = MagicMock()
        with patch("academy.modules.users.account_ids.UserRepository") as mock_repo:
            mock_repo.lock_account_ids = AsyncMock()
            mock_repo.get_latest_account_id = AsyncMock(return_value="APS041")
            manager.attach_mock(mock_repo.lock_account_ids, "lock")
            manager.attach_mock(mock_repo.get_latest_account_id, "latest")

            result = await generate_next_account_id(mock_db)

        assert result == "APS042"
        assert manager.mock_calls == [call.lock(mock_db), call.latest(mock_db, "APS")]
