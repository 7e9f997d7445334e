"""
Account Identifiers

Human-readable account ids: ``APS`` followed by a zero-padded counter
(APS001, APS002, ..., APS999, APS1000). Ids are assigned once at creation.
"""

import logging
import re

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import AppError
from academy.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

ACCOUNT_ID_PREFIX = "APS"
MIN_DIGITS = 3

_SUFFIX_PATTERN = re.compile(r"^\d+$")


class AccountIdCorruptedError(AppError):
    """The latest stored account id has a non-numeric suffix."""

    def __init__(self, account_id: str):
        super().__init__(
            f"Stored account id '{account_id}' is corrupted.",
            "ACCOUNT_ID_CORRUPTED",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def format_account_id(number: int, prefix: str = ACCOUNT_ID_PREFIX) -> str:
    return f"{prefix}{number:0{MIN_DIGITS}d}"


def next_account_id(latest: str | None, prefix: str = ACCOUNT_ID_PREFIX) -> str:
    """
    Compute the id following ``latest``.

    Args:
        latest: Most recently assigned id, or None when there is none yet

    Raises:
        AccountIdCorruptedError: If the suffix of ``latest`` is not a number
    """
    if latest is None:
        return format_account_id(1, prefix)

    suffix = latest[len(prefix) :]
    if not _SUFFIX_PATTERN.match(suffix):
        logger.error(f"Cannot parse account id suffix: {latest}")
        raise AccountIdCorruptedError(latest)

    return format_account_id(int(suffix) + 1, prefix)


async def generate_next_account_id(db: AsyncSession) -> str:
    """
    Reserve the next account id within the current transaction.

    Takes the account-id advisory lock first, so concurrent registrations
    queue here until the holder commits or rolls back.
    """
    await UserRepository.lock_account_ids(db)
    latest = await UserRepository.get_latest_account_id(db, ACCOUNT_ID_PREFIX)
    return next_account_id(latest)
