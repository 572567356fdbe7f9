# evaporative_cooling/utils/constants.py

# --- Algorithm Modes ---
MODE_COMBINED = "combined"
MODE_MAIN_EFFECTS_ONLY = "main-effects-only"
MODE_INTERACTION_ONLY = "interaction-only"

ALGORITHM_MODES = [
    MODE_COMBINED,
    MODE_MAIN_EFFECTS_ONLY,
    MODE_INTERACTION_ONLY,
]

# --- Pipeline Phases (used in error reports) ---
PHASE_MAIN_EFFECTS = "main-effects"
PHASE_INTERACTION = "interaction"
PHASE_FREE_ENERGY = "free-energy"
PHASE_ELIMINATION = "elimination"
PHASE_DATA_LOADING = "data-loading"

# --- Result File Suffixes (downstream tools key on these) ---
RESULT_SUFFIXES = {
    MODE_COMBINED: ".ec",
    MODE_MAIN_EFFECTS_ONLY: ".ec.rj",
    MODE_INTERACTION_ONLY: ".ec.rf",
}
IMPORTANCE_SUFFIX = ".importance"
SCORE_PRECISION = 8

# --- Output Directories & Files ---
CONFIG_DIR = "01_RunConfiguration"                    # Run config, metadata
SCORES_DIR = "02_AttributeScores"                     # .ec result files
HISTORY_DIR = "03_EvaporationHistory"                 # Per-iteration tables
LEARNER_WORK_DIR = "04_LearnerWorkFiles"              # Importance files from the tree ensemble

TOP_LEVEL_RESULT_DIRS = [
    CONFIG_DIR,
    SCORES_DIR,
    HISTORY_DIR,
    LEARNER_WORK_DIR,
]

CONFIG_USED_FILE = "config_used.json"
CONFIG_HASH_FILE = "config_hash.txt"
RUN_METADATA_FILE = "run_metadata.json"
ITERATION_HISTORY_FILE = "iteration_history.parquet"
EVAPORATED_ATTRIBUTES_FILE = "evaporated_attributes.parquet"
LOG_FILE = "evaporative_cooling.log"

# --- Dataset Conventions ---
DEFAULT_PHENOTYPE_COLUMN = "Class"
GENOTYPE_VALUES = frozenset({0, 1, 2})
