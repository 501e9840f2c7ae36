"""E.164 formatting for the phone field of a person.

The core keeps phone numbers as opaque text. This adapter is only handed to
AddPersonCommand, which keeps the typed input whenever the result is None.
"""

from dataclasses import dataclass

import phonenumbers

_E164 = phonenumbers.PhoneNumberFormat.E164


@dataclass(frozen=True)
class PhoneNormalizer:
    """Normalizer bound to one default region (ISO code, any case).

    With no region only numbers carrying a +country prefix parse.
    """

    default_region: str | None = None

    def __post_init__(self):
        region = (self.default_region or "").strip().upper() or None
        object.__setattr__(self, "default_region", region)

    def __call__(self, raw: str) -> str | None:
        text = str(raw or "").strip()
        if not text:
            return None
        try:
            number = phonenumbers.parse(text, self.default_region)
        except phonenumbers.NumberParseException:
            return None
        if not phonenumbers.is_valid_number(number):
            return None
        return phonenumbers.format_number(number, _E164)


def phone_normalizer(default_region: str | None) -> PhoneNormalizer:
    return PhoneNormalizer(default_region)


def normalize_phone(raw: str, default_region: str | None = None) -> str | None:
    """E.164 form of raw, or None if it is not a valid number for default_region."""
    return PhoneNormalizer(default_region)(raw)
