"""
Default hyperparameters and thresholds shared by the pipeline steps.
"""

DEFAULT_TEST_SIZE = 0.2

DEFAULT_LEARNING_RATE = 0.1
DEFAULT_ITERATIONS = 1000
# gradient descent logs its loss at DEBUG every this many steps
LOSS_LOG_EVERY = 500

DEFAULT_MAX_DEPTH = 5
DEFAULT_MIN_SAMPLES_SPLIT = 2

# sigmoid input is clipped to this magnitude so exp() cannot overflow
SIGMOID_CLIP = 500.0
DECISION_THRESHOLD = 0.5

# raw target values strictly above this become class 1
LABEL_THRESHOLD = 0.5

# column type inference looks at the first rows only
TYPE_SAMPLE_ROWS = 5
NUMERIC_SAMPLE_SHARE = 0.8

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")
