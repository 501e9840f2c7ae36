"""Infrastructure layer: concrete implementations of application ports."""

from epoch.infrastructure.document import from_document, to_document
from epoch.infrastructure.json_storage import JsonAddressBookStorage
from epoch.infrastructure.memory_storage import InMemoryAddressBookStorage
from epoch.infrastructure.phone import PhoneNormalizer, normalize_phone, phone_normalizer

__all__ = [
    "InMemoryAddressBookStorage",
    "JsonAddressBookStorage",
    "from_document",
    "PhoneNormalizer",
    "normalize_phone",
    "phone_normalizer",
    "to_document",
]
