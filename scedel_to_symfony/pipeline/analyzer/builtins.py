"""
Builtin Scedel types and their PHP representation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

INTEGER_TYPES = ("Int", "Uint", "Short", "Ushort", "Long", "Ulong", "Byte", "Ubyte")
FLOAT_TYPES = ("Float", "Double")
NUMERIC_TYPES = (*INTEGER_TYPES, *FLOAT_TYPES, "Decimal")
STRING_LENGTH_TYPES = ("String", "Base64")
TEMPORAL_TYPES = ("Date", "DateTime", "Time")
IP_TYPES = ("Ip", "IpV4", "IpV6")

# Pseudo target used when mapping constraints declared on an array type
ARRAY_TARGET = "Array"


@dataclass(frozen=True)
class BuiltinType:
    type_hint: str
    nullable: bool = False
    constraints: tuple[str, ...] = field(default_factory=tuple)
    doc_type: str | None = None


_BUILTIN_TYPES: dict[str, BuiltinType] = {
    **{name: BuiltinType("int") for name in INTEGER_TYPES},
    **{name: BuiltinType("float") for name in FLOAT_TYPES},
    "Decimal": BuiltinType("string", constraints=(r'Assert\Regex(pattern: "/^[+-]?\d+(?:\.\d+)?$/")',)),
    "String": BuiltinType("string"),
    "Url": BuiltinType("string", constraints=(r"Assert\Url",)),
    "Email": BuiltinType("string", constraints=(r"Assert\Email",)),
    "Uuid": BuiltinType("string", constraints=(r"Assert\Uuid",)),
    "Base64": BuiltinType("string", constraints=(r'Assert\Regex(pattern: "/^[A-Za-z0-9+\/]+={0,2}$/")',)),
    "Date": BuiltinType("string", constraints=(r"Assert\Date",)),
    "DateTime": BuiltinType("string", constraints=(r"Assert\DateTime",)),
    "Time": BuiltinType("string", constraints=(r"Assert\Time",)),
    "Duration": BuiltinType("int"),  # milliseconds
    "Ip": BuiltinType("string", constraints=(r"Assert\Ip",)),
    "IpV4": BuiltinType("string", constraints=(r"Assert\Ip(version: Assert\Ip::V4)",)),
    "IpV6": BuiltinType("string", constraints=(r"Assert\Ip(version: Assert\Ip::V6)",)),
    "Bool": BuiltinType("bool"),
    "True": BuiltinType("bool", constraints=(r"Assert\IdenticalTo(value: true)",)),
    "False": BuiltinType("bool", constraints=(r"Assert\IdenticalTo(value: false)",)),
    "Null": BuiltinType("mixed", nullable=True, constraints=(r"Assert\IsNull",)),
    "Binary": BuiltinType("string"),
    "Any": BuiltinType("mixed", nullable=True),
}


def builtin_type(name: str) -> BuiltinType | None:
    """Return the builtin type info for ``name``, or None if it is not a builtin."""
    return _BUILTIN_TYPES.get(name)


def is_builtin(name: str) -> bool:
    return name in _BUILTIN_TYPES
