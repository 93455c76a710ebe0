"""Option types shared by the listing and report commands."""

from __future__ import annotations

from datetime import datetime, time, timezone

import click

from supply_ledger.domain.model.transaction import TransactionType

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"]

TYPE_CHOICE = click.Choice([t.value for t in TransactionType])

date_option = click.DateTime(formats=DATE_FORMATS)


def start_of(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc)


def end_of(value: datetime | None) -> datetime | None:
    """A bare date as an end bound covers that whole day."""
    if value is None:
        return None
    if value.time() == time(0, 0):
        value = datetime.combine(value.date(), time.max)
    return value.replace(tzinfo=timezone.utc)
