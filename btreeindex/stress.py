"""
This is a harness for "stress" tests, which will perform
a large number of insert/delete operations, and validate
the tree after each one.

These should compliment, static unit tests, in that they
exercise many delete orders, and thus expose restructuring issues
that unit-tests can't catch.
"""
import logging
import itertools
import math
import random

from typing import List

from .btree import Tree
from .constants import DUMP_KEYS, DUMP_IS_LEAF
from .dataexchange import StressConfig


STRESS_TEST_CASES = [
    [1, 2, 3, 4],
    [64, 5, 13, 82],
    [82, 13, 5, 2, 0],
    [10, 20, 30, 40, 50, 60, 70],
    [72, 79, 96, 38, 47],
    [432, 507, 311, 35, 246, 950, 956, 929, 769, 744, 994, 438],
    [159, 597, 520, 189, 822, 725, 504, 397, 218, 134, 516],
    [159, 597, 520, 189, 822, 725, 504, 397],
    [960, 267, 947, 400, 795, 327, 464, 884, 667, 870, 92],
    [793, 651, 165, 282, 177, 439, 593],
    [229, 653, 248, 298, 801, 947, 63, 619, 475, 422, 856, 57, 38],
    [103, 394, 484, 380, 834, 677, 604, 611, 952, 71, 568, 291, 433, 305],
    [114, 464, 55, 450, 729, 646, 95, 649, 59, 412, 546, 340, 667, 274, 477, 363, 333,
     897, 772, 508, 182, 305, 428, 180, 22],
    [15, 382, 653, 668, 139, 70, 828, 17, 891, 121, 175, 642, 491, 281, 920],
    [967, 163, 791, 938, 939, 196, 104, 465, 886, 355, 58, 251, 928, 758, 535, 737, 357,
     125, 171, 838, 572, 745, 999, 417, 393, 458, 292, 904, 158, 286, 900, 859, 668, 183],
    [726, 361, 583, 121, 908, 789, 842, 67, 871, 461, 522, 394, 225, 637, 792, 393, 656,
     748, 39, 696],
    [54, 142, 440, 783, 619, 273, 95, 961, 692, 369, 447, 825, 555, 908, 483, 356, 40,
     110, 519, 599],
    [413, 748, 452, 666, 956, 926, 94, 813, 245, 237, 264, 709, 706, 872, 535, 214, 561,
     882, 646],
]


def leaf_keys(tree: Tree) -> List:
    """
    collect keys of all leaves, left to right
    """
    keys = []
    for node, _ in tree.nodes():
        if node.is_leaf:
            keys.extend(node.keys)
    return keys


def run_add_del_stress_test(max_degree: int, insert_keys: List, del_keys: List) -> Tree:
    """
    insert `insert_keys` into a new tree, then delete `del_keys` in order;
    validate the tree and its membership after every op

    :param max_degree:
    :param insert_keys:
    :param del_keys:
    :return: the tree after all deletes
    """
    logging.info(f"running test case: degree {max_degree}; {insert_keys} {del_keys}")
    tree = Tree(max_degree=max_degree)

    # insert
    for key in insert_keys:
        logging.info(f"inserting [{key}]")
        tree.insert(key)
        tree.validate()

    logging.debug(f"tree after inserts: {tree.to_dict()}")

    # delete and validate
    remaining = set(insert_keys)
    for idx, key in enumerate(del_keys):
        logging.info(f"deleting [{key}]")
        tree.delete(key)
        remaining.discard(key)

        # ensure tree is valid
        tree.validate()

        assert tree.find(key) is None, f"deleted key [{key}] still found at step {idx}"
        # check if all keys we expect are there in result
        expected = sorted(remaining)
        actual = leaf_keys(tree)
        assert actual == expected, f"expected: {expected}; received {actual}"

    logging.debug(f"tree after deletes: {tree.to_dict()}")
    if not remaining:
        drained = {DUMP_KEYS: [], DUMP_IS_LEAF: True}
        assert tree.to_dict() == drained, f"expected drained tree; received {tree.to_dict()}"
    return tree


def pick_delete_orders(insert_keys: List, config: StressConfig) -> List[List]:
    """
    pick delete orders for `insert_keys`: a few permutations, and one shuffle

    there is a large number of perms ~O(n!)
    and they are generated in a predictable order;
    we'll skip based on fixed step
    """
    num_perms = min(config.perms_per_case, math.factorial(len(insert_keys)))
    step_size = max(min(math.factorial(len(insert_keys)) // num_perms, config.perm_step), 1)
    # iterator over permutations
    perm_iter = itertools.permutations(insert_keys)

    del_orders = []
    while len(del_orders) < num_perms:
        for _ in range(step_size - 1):
            # skip n-1 deletes
            next(perm_iter)
        del_orders.append(list(next(perm_iter)))

    shuffled = insert_keys[:]
    random.Random(config.seed).shuffle(shuffled)
    del_orders.append(shuffled)
    return del_orders


def run_add_del_stress_suite(config: StressConfig = None, test_cases: List[List] = None):
    """
    Perform a large number of add/del operation
    and validate btree correctness.

    :param config: StressConfig; defaults are used if None
    :param test_cases: defaults to STRESS_TEST_CASES
    :return: number of test runs
    """
    if config is None:
        config = StressConfig()
    if test_cases is None:
        test_cases = STRESS_TEST_CASES

    num_runs = 0
    for max_degree in config.max_degrees:
        for insert_keys in test_cases:
            for del_keys in pick_delete_orders(insert_keys, config):
                try:
                    run_add_del_stress_test(max_degree, insert_keys, del_keys)
                except Exception as e:
                    logging.error(
                        f"Stress run failed on: degree {max_degree}; {insert_keys} {del_keys} with {e}"
                    )
                    raise
                num_runs += 1

    logging.info(f"stress suite completed {num_runs} runs")
    return num_runs
