"""
This sets up the modules for testing
"""
import os
import sys
# otherwise everything that needs to be tested will have to be explicitly imported
# which would make the top level export expose items that aren't intended for user access
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


# specific internal imports for specific tests suites
# generally we'll import entire module, unless it' clearer to import a specific member

from btreeindex.btree import Node, Tree
from btreeindex.constants import DUMP_KEYS, DUMP_CHILDREN, DUMP_IS_LEAF
from btreeindex.keytypes import (
    InvalidKey,
    KeyTypeMismatch,
    KeyValidator,
    NonComparableKey,
    NonComparableReason,
)
from btreeindex.dataexchange import Response, RunMode, StressConfig
from btreeindex.stress import (
    STRESS_TEST_CASES,
    leaf_keys,
    pick_delete_orders,
    run_add_del_stress_test,
    run_add_del_stress_suite,
)
from btreeindex.interface import parse_args_and_start, parse_degrees
