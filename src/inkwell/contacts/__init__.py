from .models import ContactRequest
from .repository import ContactRepository
from .schemas import ContactForm, ContactSchema

__all__ = ["ContactForm", "ContactRepository", "ContactRequest", "ContactSchema"]
