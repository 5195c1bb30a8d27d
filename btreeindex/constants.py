# operational constants
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# btree constants
# NOTE: max degree is the max number of children of an internal node;
# a node holds at most max degree - 1 keys once a split settles
DEFAULT_MAX_DEGREE = 3
# NOTE: this should not dip below 3; a degree 2 tree would produce
# leaves with zero keys after a split
MIN_MAX_DEGREE = 3

# keys used by the structural dump, i.e. Tree.to_dict
# NOTE: tooling reads these; don't rename
DUMP_KEYS = 'keys'
DUMP_CHILDREN = 'children'
DUMP_IS_LEAF = 'is_leaf'

# stress constants
STRESS_DEGREES = (3, 4, 5)
STRESS_PERMS_PER_CASE = 1
# permutations are generated in a predictable order; skip this many between picks
STRESS_PERM_STEP = 10
STRESS_SEED = 1

USAGE = '''
Usage:
python run.py stress [max_degree ...]
    // run the add/delete stress suite, optionally for specific degrees
python run.py help
    // print this message
'''
