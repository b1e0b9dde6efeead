"""Embed live REST XML responses into API documentation."""
from .config import Settings, load_settings
from .constants import ConstantRegistry
from .executor import RestExecutor
from .parameters import MethodType, RequestSpec, parse
from .preprocessor import Preprocessor
from .taglets import RestTaglet, Tag, SourcePosition, ValueTaglet

__all__ = [
    "Settings",
    "load_settings",
    "ConstantRegistry",
    "RestExecutor",
    "MethodType",
    "RequestSpec",
    "parse",
    "Preprocessor",
    "RestTaglet",
    "Tag",
    "SourcePosition",
    "ValueTaglet",
]
