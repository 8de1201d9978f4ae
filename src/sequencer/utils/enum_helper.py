"""Enum conversion utilities"""

from enum import Enum
from typing import TypeVar, Type, Optional, List

# Generic type for any Enum subclass
E = TypeVar("E", bound=Enum)

class EnumHelper:
    """
    Utility class for working with Enums:
    - Convert enum members to strings (with case options)
    - Parse strings back to enum members (case-insensitive)
    - List all member names
    """

    @staticmethod
    def to_string(enum_value: E, lowercase: bool = False) -> str:
        """
        Convert Enum member to string (its name).

        Args:
            enum_value: Enum member
            lowercase: Return lowercase string (for config files)

        Returns:
            Enum member name as string
        """
        if not isinstance(enum_value, Enum):
            raise TypeError(f"Expected Enum, got {type(enum_value).__name__}")
        name = enum_value.name
        return name.lower() if lowercase else name

    @staticmethod
    def from_string(enum_class: Type[E], name: str, case_insensitive: bool = True,
                    default: Optional[E] = None) -> E:
        """
        Parse string to Enum member.

        Args:
            enum_class: Enum class to parse into
            name: String name (case-insensitive by default)
            case_insensitive: If True, matches ignoring case
            default: Return value if not found (None = raise)

        Returns:
            Enum member or default if provided

        Raises:
            ValueError: Name does not match any member and no default given
        """
        if not issubclass(enum_class, Enum):
            raise TypeError(f"{enum_class} is not an Enum class")

        lookup = name.upper() if case_insensitive else name

        for member in enum_class:
            if (member.name.upper() if case_insensitive else member.name) == lookup:
                return member

        if default is not None:
            return default

        raise ValueError(
            f"Invalid value '{name}' for {enum_class.__name__}, "
            f"expected one of: {', '.join(EnumHelper.names(enum_class, lowercase=True))}"
        )

    @staticmethod
    def coerce(enum_class: Type[E], value) -> E:
        """Accept either an enum member or its name."""
        if isinstance(value, enum_class):
            return value
        if isinstance(value, str):
            return EnumHelper.from_string(enum_class, value)
        raise TypeError(f"Expected str or {enum_class.__name__}, got {type(value).__name__}")

    @staticmethod
    def names(enum_class: Type[E], lowercase: bool = False) -> List[str]:
        """List all member names of an Enum class."""
        return [m.name.lower() if lowercase else m.name for m in enum_class]
