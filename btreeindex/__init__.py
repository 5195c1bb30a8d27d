"""
btreeindex: an in-memory btree over keys of a single, totally ordered, type.
"""
from .btree import Node, Tree
from .keytypes import (
    InvalidKey,
    KeyTypeMismatch,
    KeyValidator,
    NonComparableKey,
    NonComparableReason,
)
from .interface import config_logging, parse_args_and_start
