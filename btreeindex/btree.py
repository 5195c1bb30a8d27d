from __future__ import annotations

"""
Contains the implementation of the btree
"""
import logging

from typing import Any, List, Optional, Tuple, Type

from .constants import (
    DEFAULT_MAX_DEGREE,
    MIN_MAX_DEGREE,
    DUMP_KEYS,
    DUMP_CHILDREN,
    DUMP_IS_LEAF,
)
from .keytypes import KeyValidator, NonComparableKey, NonComparableReason


class Node:
    """
    A node holds sorted keys, and if internal, one more child than keys.

    A node owns its children. `parent` is only a back-reference, used to walk
    up the tree when a split or a merge must be propagated; it's None for the root.
    """

    def __init__(
        self, keys: List = None, children: List[Node] = None, is_leaf: bool = False
    ):
        self.keys = keys if keys is not None else []
        self.children = children if children is not None else []
        self.is_leaf = is_leaf
        self.parent = None
        self.set_parent()

    def set_parent(self):
        """
        point all children's parent ref to self; must be invoked
        whenever children are moved into this node
        """
        for child in self.children:
            child.parent = self

    @property
    def entries(self) -> int:
        return len(self.keys)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def child_index(self, child: Node) -> int:
        """
        position of `child` amongst self's children.
        NOTE: nodes are compared by identity
        """
        for child_num, candidate in enumerate(self.children):
            if candidate is child:
                return child_num
        raise ValueError("node is not a child of this node")

    def find_adjacent_node(self) -> Tuple[Optional[int], Optional[Node], bool]:
        """
        find a sibling to borrow from or merge with. The left sibling is preferred.

        :return: (separator_num, sibling, is_predecessor)
            separator_num is the position of the parent's key separating self and sibling.
            is_predecessor is True when sibling is left of self.
            (None, None, False) for the root
        """
        if self.is_root:
            return None, None, False

        child_num = self.parent.child_index(self)
        if child_num == 0:
            return 0, self.parent.children[1], False
        return child_num - 1, self.parent.children[child_num - 1], True

    def to_dict(self) -> dict:
        if self.is_leaf:
            return {DUMP_KEYS: list(self.keys), DUMP_IS_LEAF: True}
        return {
            DUMP_KEYS: list(self.keys),
            DUMP_CHILDREN: [child.to_dict() for child in self.children],
        }

    def __repr__(self):
        kind = "leaf" if self.is_leaf else "internal"
        return f"Node({kind}, keys={self.keys})"


class Tree:
    """
    An in-memory btree over keys of a single, totally ordered, type.

    The public interface consists of `find`, `insert`, `delete`,
    `to_dict`, and validators. The remaining methods should not
    be invoked by external actors.

    All keys live in leaves. Internal nodes hold copies of leaf keys
    as separators: keys in children[i] are strictly less than keys[i],
    and keys in children[i+1] are greater than or equal to keys[i].

    NOTE: the tree is not safe for concurrent mutation; callers
    must serialize inserts and deletes.
    """

    def __init__(
        self,
        max_degree: int = DEFAULT_MAX_DEGREE,
        root: Node = None,
        key_type: Type = None,
    ):
        """

        :param max_degree: max number of children of an internal node
        :param root: optional pre-built tree; its keys are validated
        :param key_type: optional; otherwise the first inserted key fixes the key type
        """
        if max_degree < MIN_MAX_DEGREE:
            raise ValueError(
                f"max_degree must be at least {MIN_MAX_DEGREE}; received {max_degree}"
            )
        self.max_degree = max_degree
        self.validator = KeyValidator(key_type)
        self.root = root
        if self.root is not None:
            self.root.parent = None
            self.validate_keys()

    @property
    def key_type(self) -> Optional[Type]:
        return self.validator.key_type

    # section : public interface: find, insert, and delete
    # NB: the helper methods are clustered along these 3 methods

    def find(self, key: Any) -> Optional[Node]:
        """
        find the leaf containing `key`

        :param key: key being seeked
        :return: leaf node if key exists, else None
        """
        if not self.validator.matches_type(key):
            # a key of a different type can't be in the tree
            return None

        try:
            leaf = self.find_leaf(key)
        except NonComparableKey:
            # key is unordered against some stored key; thus it is not stored
            return None
        if leaf is None:
            return None

        for leaf_key in leaf.keys:
            if leaf_key == key:
                return leaf
        return None

    def insert(self, key: Any) -> bool:
        """
        insert `key` into the tree

        Algorithm:
            validate the key; the key must match the tree's key type and be
            comparable. This happens before anything is mutated.

            find the leaf where the key should go. If the key already exists,
            the op terminates, since duplicate keys are not supported.

            insert the key into the leaf at its sorted position. If the leaf now
            holds `max_degree` keys, split it into a left (older) and right (new) node.
            The first key of the right split is copied into the parent as a separator.

            If the parent now has more than `max_degree` children, it too is split;
            the middle key is moved (not copied) into its parent. This proceeds
            recursively until an ancestor has enough room.

            If the root is split, a new root is created; i.e. the tree grows by 1 level.

        :param key:
        :return: True if inserted; False if key already existed
        """
        if self.root is None:
            self.validator.admit(key)
            self.root = Node(keys=[key], is_leaf=True)
            logging.debug(f"created root leaf with key [{key}]")
            return True

        # type must be checked before descending, since mismatched types may not compare
        self.validator.check(key)
        leaf = self.find_leaf(key)
        cell_num = self.leaf_node_find(leaf, key)
        if cell_num < leaf.entries and leaf.keys[cell_num] == key:
            return False

        self.validator.admit(key, peers=leaf.keys)
        self.leaf_node_insert(leaf, cell_num, key)
        return True

    def delete(self, key: Any):
        """
        delete `key`

        Algorithm:
            find the key, i.e. leaf node; if the key does not exist, op terminates

            if the key exists, remove it from the leaf.

            If the leaf now holds fewer than the min number of keys,
            find an adjacent sibling (left preferred). If the node and
            sibling fit in a single node, they are merged, and the separator
            is deleted from the parent. This may cause the parent to underflow,
            in which case the parent is restructured, recursively.

            If they don't fit, one key (and child, for internal nodes) is moved
            over from the sibling, and the separator in the parent is updated.

            If the root is left with a single child, the child becomes the new root,
            i.e. the tree reduces in height by 1.
        """
        if not self.validator.matches_type(key):
            return

        try:
            leaf = self.find_leaf(key)
            if leaf is None:
                return
            cell_num = self.leaf_node_find(leaf, key)
        except NonComparableKey:
            return

        if cell_num >= leaf.entries or leaf.keys[cell_num] != key:
            return

        self.delete_entry(leaf, key)

    def to_dict(self) -> dict:
        """
        structural dump of the tree; {} for an empty tree
        """
        if self.root is None:
            return {}
        return self.root.to_dict()

    # section: logic helpers - find

    def find_leaf(self, key: Any) -> Optional[Node]:
        """
        descend from root to the leaf where `key` exists or should go

        :return: leaf node; None if tree is empty
        """
        if self.root is None:
            return None

        node = self.root
        while not node.is_leaf:
            child_num = self.internal_node_find(node, key)
            node = node.children[child_num]
        return node

    @staticmethod
    def internal_node_find(node: Node, key: Any) -> int:
        """
        binary search for the child, of internal `node`, whose subtree `key` belongs to.
        This is the child at the position of the smallest key >= `key`, or the
        child right of it, if that key equals `key`; or the last child if no
        key is >= `key`.

        :return: child_num in range [0, num_keys]
        """
        left_closed_index = 0
        # 'open' since it's one past right index
        right_open_index = node.entries
        while left_closed_index != right_open_index:
            index = left_closed_index + (right_open_index - left_closed_index) // 2
            key_at_index = node.keys[index]
            try:
                if key == key_at_index:
                    # keys equal to a separator live in the right subtree
                    return index + 1
                is_less = key < key_at_index
            except TypeError:
                raise NonComparableKey(key, NonComparableReason.NoOrdering, peer=key_at_index)
            if is_less:
                right_open_index = index
            else:
                left_closed_index = index + 1

        return left_closed_index

    @staticmethod
    def leaf_node_find(node: Node, key: Any) -> int:
        """
        binary search for `key` on leaf `node`

        :return: cell_num of `key` if it exists, else position where it should be inserted
        """
        left_closed_index = 0
        right_open_index = node.entries
        while left_closed_index != right_open_index:
            index = left_closed_index + (right_open_index - left_closed_index) // 2
            key_at_index = node.keys[index]
            try:
                if key == key_at_index:
                    return index
                is_less = key < key_at_index
            except TypeError:
                raise NonComparableKey(key, NonComparableReason.NoOrdering, peer=key_at_index)
            if is_less:
                right_open_index = index
            else:
                left_closed_index = index + 1

        return left_closed_index

    # section: logic helpers - insert

    def leaf_node_insert(self, node: Node, cell_num: int, key: Any):
        """
        insert `key` at `cell_num` of leaf `node`; split leaf if it overflows

        :param node: destination leaf
        :param cell_num: sorted position of key
        :param key:
        """
        node.keys.insert(cell_num, key)
        if node.entries < self.max_degree:
            return

        # split; left half stays in place, right half moves to a new leaf
        split_at = node.entries // 2
        new_node = Node(keys=node.keys[split_at:], is_leaf=True)
        node.keys = node.keys[:split_at]
        logging.debug(
            f"split leaf into {node.keys} and {new_node.keys}; separator [{new_node.keys[0]}]"
        )
        self.insert_in_parent(node, new_node, new_node.keys[0])

    def insert_in_parent(self, node: Node, new_node: Node, separator: Any):
        """
        register `new_node`, the right split of `node`, with the parent of `node`.
        Splits the parent if it overflows, recursing up the ancestor chain.

        :param node: left (older) split
        :param new_node: right (newer) split
        :param separator: smallest key reachable via `new_node`
        """
        if node.is_root:
            self.root = Node(keys=[separator], children=[node, new_node])
            logging.debug(
                f"created new root with separator [{separator}]; height: {self.height()}"
            )
            return

        parent = node.parent
        child_num = parent.child_index(node)
        parent.children.insert(child_num + 1, new_node)
        parent.keys.insert(child_num, separator)
        new_node.parent = parent

        if len(parent.children) <= self.max_degree:
            return

        # split internal node; the middle key moves up, it's not retained by either split
        keys = parent.keys
        children = parent.children
        mid_key = len(keys) // 2
        mid_child = (len(children) + 1) // 2

        parent.keys = keys[:mid_key]
        parent.children = children[:mid_child]
        new_parent = Node(keys=keys[mid_key + 1 :], children=children[mid_child:])
        logging.debug(
            f"split internal node into {parent.keys} and {new_parent.keys}; "
            f"promoting [{keys[mid_key]}]"
        )
        self.insert_in_parent(parent, new_parent, keys[mid_key])

    # section: logic helpers - delete

    def min_keys(self, is_leaf: bool) -> int:
        """
        min number of keys a non-root node must hold after a delete
        """
        if is_leaf:
            return (self.max_degree - 1) // 2
        return self.max_degree // 2

    def delete_entry(self, node: Node, key: Any, child: Node = None):
        """
        remove `key` from `node`, and restore tree invariants.

        :param node:
        :param key: key to remove
        :param child: when `node` is internal, the child to remove alongside `key`,
            i.e. the node that was merged into its sibling
        """
        node.keys.remove(key)
        if child is not None:
            node.children.pop(node.child_index(child))

        if node.is_root:
            if len(node.children) == 1:
                self.root = node.children[0]
                self.root.parent = None
                logging.debug(f"root shrunk; height: {self.height()}")
            return

        if node.entries >= self.min_keys(node.is_leaf):
            return

        separator_num, sibling, is_predecessor = node.find_adjacent_node()
        if self.can_coalesce(node, sibling):
            self.coalesce(node, sibling, separator_num, is_predecessor)
        else:
            self.redistribute(node, sibling, separator_num, is_predecessor)

    def can_coalesce(self, node: Node, sibling: Node) -> bool:
        """
        whether `node` and `sibling` fit in a single node
        """
        entries = node.entries + sibling.entries
        if not node.is_leaf:
            # the separator is pulled down into the merged node
            entries += 1
        return entries < self.max_degree

    def coalesce(
        self, node: Node, sibling: Node, separator_num: int, is_predecessor: bool
    ):
        """
        merge the right of (node, sibling) into the left; then delete the
        separator and the right node from the parent
        """
        parent = node.parent
        separator = parent.keys[separator_num]
        left, right = (sibling, node) if is_predecessor else (node, sibling)

        if not left.is_leaf:
            left.keys.append(separator)
            left.children.extend(right.children)
            left.set_parent()
        left.keys.extend(right.keys)
        logging.debug(f"coalesced nodes into {left.keys}; removing separator [{separator}]")

        self.delete_entry(parent, separator, right)

    def redistribute(
        self, node: Node, sibling: Node, separator_num: int, is_predecessor: bool
    ):
        """
        move a single key (and child, if internal) from `sibling` to `node`,
        and update the separator in the parent.

        A predecessor gives its last key to the front of `node`; a successor
        gives its first key to the end of `node`.
        """
        parent = node.parent
        separator = parent.keys[separator_num]

        if is_predecessor:
            borrowed_key = sibling.keys.pop()
            if node.is_leaf:
                node.keys.insert(0, borrowed_key)
                parent.keys[separator_num] = borrowed_key
            else:
                borrowed_child = sibling.children.pop()
                node.keys.insert(0, separator)
                node.children.insert(0, borrowed_child)
                borrowed_child.parent = node
                parent.keys[separator_num] = borrowed_key
        else:
            borrowed_key = sibling.keys.pop(0)
            if node.is_leaf:
                node.keys.append(borrowed_key)
                parent.keys[separator_num] = sibling.keys[0]
            else:
                borrowed_child = sibling.children.pop(0)
                node.keys.append(separator)
                node.children.append(borrowed_child)
                borrowed_child.parent = node
                parent.keys[separator_num] = borrowed_key

        logging.debug(
            f"redistributed [{borrowed_key}] from {'left' if is_predecessor else 'right'} sibling; "
            f"separator [{separator}] is now [{parent.keys[separator_num]}]"
        )

    # section: utility methods

    def height(self) -> int:
        """
        number of levels; 0 for an empty tree
        """
        height = 0
        node = self.root
        while node is not None:
            height += 1
            node = None if node.is_leaf else node.children[0]
        return height

    def nodes(self) -> List[Tuple[Node, int]]:
        """
        all reachable nodes, with their depth, in depth-first order
        """
        if self.root is None:
            return []

        result = []
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            result.append((node, depth))
            for child in reversed(node.children):
                stack.append((child, depth + 1))
        return result

    # section: validators

    def validate_keys(self):
        """
        run every key of a pre-built tree through the key validator.
        If no key type was given, the first key fixes it.
        """
        for node, _ in self.nodes():
            self.validator.validate_keys(node.keys)

    def validate(self) -> bool:
        """
        invoke all sub-validators

        :return:
            raises AssertionError on failure
            True on success
        """
        self.validate_shape()
        self.validate_ordering()
        self.validate_parent_refs()
        self.validate_occupancy()
        return True

    def validate_shape(self) -> bool:
        """
        validate:
            1) leaves have no children; internal nodes have one more child than keys
            2) no node holds more than max_degree - 1 keys
            3) all leaves are at the same depth
        """
        leaf_depths = set()
        for node, depth in self.nodes():
            if node.is_leaf:
                assert (
                    len(node.children) == 0
                ), f"leaf {node} has {len(node.children)} children"
                leaf_depths.add(depth)
            else:
                assert len(node.children) == node.entries + 1, (
                    f"internal node {node} has {len(node.children)} children; "
                    f"expected {node.entries + 1}"
                )
            assert (
                node.entries < self.max_degree
            ), f"node {node} exceeds {self.max_degree - 1} keys"

        assert len(leaf_depths) <= 1, f"leaves found at multiple depths: {leaf_depths}"
        return True

    def validate_ordering(self) -> bool:
        """
        traverse the tree, starting at root, and ensure keys are strictly
        increasing within a node, and bounded by the ancestors' separators
        """
        if self.root is None:
            return True

        # bounds are (inclusive lower, exclusive upper); None means unbounded
        stack = [(self.root, None, None)]
        while stack:
            node, lower_bound, upper_bound = stack.pop()
            for key_num, key in enumerate(node.keys):
                if key_num > 0:
                    prev_key = node.keys[key_num - 1]
                    assert (
                        key > prev_key
                    ), f"validation: keys of {node} must be strictly increasing"
                assert (
                    lower_bound is None or key >= lower_bound
                ), f"validation: lower bound [{lower_bound}] constraint violated [{key}] in {node}"
                assert (
                    upper_bound is None or key < upper_bound
                ), f"validation: upper bound [{upper_bound}] constraint violated [{key}] in {node}"

            for child_num, child in enumerate(node.children):
                child_lower_bound = (
                    node.keys[child_num - 1] if child_num > 0 else lower_bound
                )
                child_upper_bound = (
                    node.keys[child_num] if child_num < node.entries else upper_bound
                )
                stack.append((child, child_lower_bound, child_upper_bound))

        return True

    def validate_parent_refs(self) -> bool:
        """
        validate that each child refers to its parent, and the root has no parent
        """
        if self.root is None:
            return True

        assert self.root.parent is None, "root must not have a parent"
        for node, _ in self.nodes():
            for child in node.children:
                assert (
                    child.parent is node
                ), f"child {child} ref to parent [{child.parent}], does not match parent {node}"
        return True

    def validate_occupancy(self) -> bool:
        """
        validate that every non-root node is sufficiently full.

        NOTE: for even degrees, an internal split leaves the right half one key
        short of min_keys(False); thus internal nodes are held to (max_degree - 1) // 2
        """
        floor = (self.max_degree - 1) // 2
        for node, depth in self.nodes():
            if depth == 0:
                if not node.is_leaf:
                    assert node.entries > 0, "internal root must hold at least 1 key"
                continue
            assert (
                node.entries >= floor
            ), f"node {node} at depth {depth} holds fewer than {floor} keys"
        return True
