from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.db.models import Model


class ContactRequest(Model):
    __tablename__ = "contacts"

    created: Mapped[int] = mapped_column(Integer, index=True)
    email: Mapped[str] = mapped_column(String(320))
    subject: Mapped[str] = mapped_column(String(255), default="")
    message: Mapped[str] = mapped_column(Text, default="")

    def __repr__(self) -> str:
        return f"<ContactRequest(id={self.id}, email='{self.email}')>"
