from datetime import UTC, datetime, timedelta

from bson import ObjectId
from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField


def utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision BSON stores."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes coming back from the driver."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def next_timestamp(previous: datetime | None) -> datetime:
    """A timestamp strictly later than ``previous``, at millisecond resolution."""
    now = utc_now()
    if previous is not None:
        floor = ensure_utc(previous) + timedelta(milliseconds=1)
        if now < floor:
            return floor
    return now


class Document(BaseModel):
    """Base for records persisted as MongoDB documents.

    ``object_id`` is the database-assigned ``_id`` rendered as a hex string.
    Timestamps follow the ``createdAt`` / ``updatedAt`` naming of the stored
    documents and the GraphQL schema.
    """

    model_config = ConfigDict(populate_by_name=True)

    object_id: str = PydanticField(
        alias="_id",
        default_factory=lambda: str(ObjectId()),
        description="Database-assigned identifier",
    )
    created_at: datetime = PydanticField(alias="createdAt", default_factory=utc_now)
    updated_at: datetime = PydanticField(alias="updatedAt", default_factory=utc_now)
