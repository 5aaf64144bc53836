"""Packing of module and function identifiers into global function ids."""

from __future__ import annotations

from gcovfmt.constants import WORD_MASK

DEFAULT_ID_WIDTH = 32


def _id_mask(width: int) -> int:
    if width <= 0:
        raise ValueError(f"id width must be positive, got {width}")
    return (1 << width) - 1


def extract_module_id(gid: int, width: int = DEFAULT_ID_WIDTH) -> int:
    """Return the module id held in the upper field of a global id."""
    return ((gid >> width) & _id_mask(width)) & WORD_MASK


def extract_func_id(gid: int, width: int = DEFAULT_ID_WIDTH) -> int:
    """Return the function id held in the lower field of a global id."""
    return (gid & _id_mask(width)) & WORD_MASK


def gen_func_global_id(module: int, func: int, width: int = DEFAULT_ID_WIDTH) -> int:
    """Combine a module id and a function id into one global id."""
    _id_mask(width)
    return (module << width) | func