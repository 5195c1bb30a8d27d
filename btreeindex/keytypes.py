"""
Contains the key validator, i.e. the gate every key must pass
before it can be admitted into a tree.

A tree holds keys of a single type. The type is either passed in
explicitly, or fixed by the first key that is successfully inserted.
Independently of the type, keys must be totally ordered, since the
tree's placement logic relies on every pair of keys comparing as
exactly one of less, equal, or greater.
"""
import logging

from enum import Enum, auto
from typing import Any, Iterable, Optional, Type


class NonComparableReason(Enum):
    # key's type does not implement ordering, e.g. dict, complex
    NoOrdering = auto()
    # ordering exists, but did not yield a single outcome, e.g. float('nan'), sets
    Indeterminate = auto()


class InvalidKey(Exception):
    """
    Base for errors raised when a key can not be admitted into a tree
    """
    pass


class KeyTypeMismatch(InvalidKey):
    """
    Key's type differs from the tree's established key type
    """

    def __init__(self, key: Any, expected_type: Type):
        self.key = key
        self.expected_type = expected_type
        self.actual_type = type(key)
        super().__init__(
            f"key [{key!r}] has type [{self.actual_type.__name__}]; "
            f"tree only admits keys of type [{expected_type.__name__}]"
        )


class NonComparableKey(InvalidKey):
    """
    Key can not be ordered against itself or against a peer key
    """

    def __init__(self, key: Any, reason: NonComparableReason, peer: Any = None):
        self.key = key
        self.reason = reason
        self.peer = peer
        if reason == NonComparableReason.NoOrdering:
            detail = f"type [{type(key).__name__}] does not support ordering comparison"
        else:
            detail = f"comparison against [{peer!r}] is indeterminate"
        super().__init__(f"key [{key!r}] is not comparable: {detail}")


class KeyValidator:
    """
    Admits or rejects keys for a single tree.

    Validation never mutates the tree; the only state here is the
    key type, which is bound once and never changes afterwards.
    """

    def __init__(self, key_type: Optional[Type] = None):
        self.key_type = key_type

    @property
    def is_bound(self) -> bool:
        return self.key_type is not None

    def admit(self, key: Any, peers: Iterable = ()):
        """
        check `key`, and bind the key type if this is the first admitted key.

        :param key: prospective key
        :param peers: existing keys `key` will be compared against when placed
        :return:
            raises KeyTypeMismatch or NonComparableKey on failure
        """
        self.check(key, peers)
        if not self.is_bound:
            self.key_type = type(key)
            logging.debug(f"key type bound to [{self.key_type.__name__}]")

    def check(self, key: Any, peers: Iterable = ()):
        """
        check `key` without binding anything
        """
        self.check_type(key)
        self.check_comparable(key, peers)

    def matches_type(self, key: Any) -> bool:
        return not self.is_bound or type(key) is self.key_type

    def check_type(self, key: Any):
        if not self.matches_type(key):
            raise KeyTypeMismatch(key, self.key_type)

    def check_comparable(self, key: Any, peers: Iterable = ()):
        """
        a key must compare equal to itself, and compare as exactly one
        of less, equal, greater against each peer
        """
        outcome = self.compare(key, key)
        if outcome != 0:
            raise NonComparableKey(key, NonComparableReason.Indeterminate, peer=key)

        for peer in peers:
            if self.compare(key, peer) is None:
                raise NonComparableKey(key, NonComparableReason.Indeterminate, peer=peer)

    @staticmethod
    def compare(key: Any, peer: Any) -> Optional[int]:
        """
        three-way compare of `key` with `peer`

        :return: -1, 0, 1; None if the outcome is indeterminate
            raises NonComparableKey if ordering is not supported
        """
        try:
            less = key < peer
            greater = key > peer
            equal = key == peer
        except TypeError:
            raise NonComparableKey(key, NonComparableReason.NoOrdering, peer=peer)

        try:
            outcomes = (bool(less), bool(equal), bool(greater))
        except ValueError:
            # e.g. element-wise comparisons whose truth value is ambiguous
            return None

        if sum(outcomes) != 1:
            return None
        if outcomes[0]:
            return -1
        return 0 if outcomes[1] else 1

    def validate_keys(self, keys: Iterable):
        """
        check an existing, sorted, sequence of keys, e.g. the keys of a
        pre-built node. Binds the key type from the first key if unbound.
        """
        prev_key = None
        has_prev = False
        for key in keys:
            if has_prev:
                self.admit(key, peers=(prev_key,))
            else:
                self.admit(key)
            prev_key = key
            has_prev = True
