"""Data directives and the providers that enumerate them."""

from .directives import (
    ClassData,
    DataDirective,
    FileData,
    InlineData,
    MemberData,
    TheoryMarker,
    class_data,
    file_data,
    get_data_directives,
    get_theory,
    inline_data,
    member_data,
    theory,
)
from .providers import DataProvider, ProviderResolver, normalize_row, provider_for


__all__ = [
    "ClassData",
    "DataDirective",
    "DataProvider",
    "FileData",
    "InlineData",
    "MemberData",
    "ProviderResolver",
    "TheoryMarker",
    "class_data",
    "file_data",
    "get_data_directives",
    "get_theory",
    "inline_data",
    "member_data",
    "normalize_row",
    "provider_for",
    "theory",
]
