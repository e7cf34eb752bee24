"""Configuration sets and the constraints matched against them."""

from mediadevices.core.prop.constraints import (
    Bool,
    BoolExact,
    Constraint,
    Float,
    FloatExact,
    FloatOneOf,
    FloatRanged,
    Int,
    IntExact,
    IntOneOf,
    IntRanged,
    MediaConstraints,
    String,
    StringExact,
    StringOneOf,
)
from mediadevices.core.prop.media import Audio, Media, Video

__all__ = [
    "Audio",
    "Bool",
    "BoolExact",
    "Constraint",
    "Float",
    "FloatExact",
    "FloatOneOf",
    "FloatRanged",
    "Int",
    "IntExact",
    "IntOneOf",
    "IntRanged",
    "Media",
    "MediaConstraints",
    "String",
    "StringExact",
    "StringOneOf",
    "Video",
]
