from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class ContactForm(BaseModel):
    email: EmailStr
    subject: str = Field(default="", max_length=255)
    message: str = ""

    @field_validator("subject", "message")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class ContactSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created: int
    email: str
    subject: str = ""
    message: str = ""

    @property
    def created_display(self) -> str:
        return datetime.fromtimestamp(self.created).strftime("%Y-%m-%d %H:%M")
