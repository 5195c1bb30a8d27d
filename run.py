"""
Main interface for developers of btreeindex.

Utility to run the stress suite.

Requires btreeindex to be installed.
"""

import sys

from btreeindex import parse_args_and_start
from btreeindex.constants import EXIT_SUCCESS, EXIT_FAILURE


if __name__ == '__main__':
    resp = parse_args_and_start(sys.argv[1:])
    sys.exit(EXIT_SUCCESS if resp.success else EXIT_FAILURE)
