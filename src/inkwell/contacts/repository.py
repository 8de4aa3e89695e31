from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from inkwell.content.schemas import now_timestamp

from .models import ContactRequest
from .schemas import ContactForm, ContactSchema

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class ContactRepository:
    """Append, read and delete contact messages. Nothing is ever edited."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, form: ContactForm) -> ContactSchema:
        row = await ContactRequest.objects.create(
            self.db, created=now_timestamp(), **form.model_dump()
        )
        logger.info("Stored contact message %s", row.id)
        return ContactSchema.model_validate(row)

    async def find(self, contact_id: int) -> ContactSchema:
        row = await ContactRequest.objects.get_by_pk(self.db, contact_id)
        return ContactSchema.model_validate(row)

    async def find_all(self) -> list[ContactSchema]:
        rows = await ContactRequest.objects.all().fetch(self.db)
        return [ContactSchema.model_validate(row) for row in rows]

    async def count_all(self) -> int:
        return await ContactRequest.objects.all().count(self.db)

    async def find_recent(self, limit: int = 10, offset: int = 0) -> list[ContactSchema]:
        """Newest messages first."""
        rows = await (
            ContactRequest.objects.all()
            .order_by(ContactRequest.created.desc(), ContactRequest.id.desc())
            .offset(max(offset, 0))
            .limit(max(limit, 0))
            .fetch(self.db)
        )
        return [ContactSchema.model_validate(row) for row in rows]

    async def delete(self, contact_id: int) -> int:
        return await ContactRequest.objects.delete_by_pk(self.db, contact_id)
