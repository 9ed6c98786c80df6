import os

# ============================================================================
# DATA
# ============================================================================
# Construct paths relative to the repo root (works regardless of where you run it from)
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(SCRIPT_DIR, '..', 'data', 'raw')
MATRIX_FILE = os.path.join(DATA_DIR, 'LONDON_GANG.csv')
ATTRIBUTES_FILE = os.path.join(DATA_DIR, 'LONDON_GANG_ATTR.csv')
RESULTS_ROOT = 'results'

N_PERSONS = 54

# Tie strength codes
TIE_LABELS = {
    1: 'Hang out together',
    2: 'Co-offend together',
    3: 'Co-offend together, serious crime together',
    4: 'Co-offend together, serious crime together, kin',
}
TIE_WEIGHTS = tuple(TIE_LABELS)
CO_OFFENDING_WEIGHT = 2  # min weight for the co-offending subgraph

# Person attributes
ID_COLUMN = 'Person'
ATTRIBUTE_COLUMNS = ['Age', 'Birthplace', 'Residence', 'Arrests', 'Convictions',
                     'Prison', 'Music', 'Ranking']
BIRTHPLACES = {
    1: 'West Africa',
    2: 'Caribbean',
    3: 'UK',
    4: 'East Africa',
}
BINARY_COLUMNS = ['Residence', 'Prison', 'Music']
COUNT_COLUMNS = ['Age', 'Arrests', 'Convictions']
RANKINGS = (1, 2, 3, 4, 5)

# ============================================================================
# ANALYSIS PARAMETERS
# ============================================================================
POWER_PRECISION = 6  # stop when the 2-step L1 change < 10^-t
POWER_MAX_ITER = 10000
POWER_DAMPING = 1.0  # added to the diagonal of the tie matrix

LINKAGE_METHOD = 'average'
N_CLUSTERS = 4
SIMILARITY_THRESHOLD = 0.5

N_PERMUTATIONS = 1000
RANDOM_STATE = 42

CLASSIFIER_TARGET = 'Prison'
CLASSIFIER_FEATURES = ['Age', 'Birthplace', 'Residence', 'Arrests', 'Convictions', 'Music',
                       'degree', 'betweenness', 'closeness', 'pagerank', 'power']
TEST_SIZE = 0.3
TREE_MAX_DEPTH = 3

TOP_N = 10
