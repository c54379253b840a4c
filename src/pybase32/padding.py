"""
Padding options controlling how the '=' character is written and accepted
"""

from enum import Enum


class PaddingOption(Enum):
    """
    Whether padding is emitted on encode and how it is treated on decode

    PRESENT          pad on encode, padding required on decode
    ABSENT           no padding on encode, padding prohibited on decode
    PRESENT_OPTIONAL pad on encode, padding optional on decode
    ABSENT_OPTIONAL  no padding on encode, padding optional on decode

    Whenever padding is accepted on decode, a padded group must carry the exact
    number of pad characters.
    """
    PRESENT = "present"
    ABSENT = "absent"
    PRESENT_OPTIONAL = "present_optional"
    ABSENT_OPTIONAL = "absent_optional"

    @property
    def pad_on_encode(self) -> bool:
        return self in (PaddingOption.PRESENT, PaddingOption.PRESENT_OPTIONAL)

    @property
    def required_on_decode(self) -> bool:
        return self is PaddingOption.PRESENT

    @property
    def prohibited_on_decode(self) -> bool:
        return self is PaddingOption.ABSENT

    @property
    def optional_on_decode(self) -> bool:
        return self in (PaddingOption.PRESENT_OPTIONAL, PaddingOption.ABSENT_OPTIONAL)
