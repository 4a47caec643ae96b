"""
Serialization utilities - enum <-> string conversion

Used when enum values arrive as strings from YAML or element attributes.
"""

from enum import Enum
from typing import Optional, Type, TypeVar

T = TypeVar('T', bound=Enum)


class Serializer:
    """Central enum serialization"""

    @staticmethod
    def enum_to_str(value: Optional[Enum]) -> Optional[str]:
        """Convert any enum to string name"""
        return value.name if value else None

    @staticmethod
    def str_to_enum(value: str, enum_type: Type[T]) -> T:
        """
        Convert string to enum by name or value, raise ValueError if invalid

        Accepts "FADE_IN", "fade_in" and the value "fade-in" alike.
        """
        if isinstance(value, enum_type):
            return value
        text = str(value).strip()
        try:
            return enum_type[text.upper().replace("-", "_")]
        except KeyError:
            pass
        for member in enum_type:
            if member.value == text:
                return member
        raise ValueError(f"Invalid {enum_type.__name__}: {value}")
