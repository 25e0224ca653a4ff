__all__ = [
    "build_cascade",
    "canonicalize",
    "parse_blocks",
    "parse_direct",
    "recover",
    "repair_at_error",
    "salvage_sections",
    "split_blocks",
    "strip_fences",
]

from .canonical import canonicalize
from .parser import build_cascade, recover
from .strategies import parse_blocks, parse_direct, repair_at_error, salvage_sections, split_blocks, strip_fences
