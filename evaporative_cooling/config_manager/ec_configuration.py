from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from evaporative_cooling.utils import constants
from evaporative_cooling.utils.exceptions import ConfigurationError

IMPORTANCE_MEASURES = ("auto", "gini", "permutation")


@dataclass(frozen=True)
class ECConfiguration:
    """
    Typed, validated parameters for one Evaporative Cooling run.

    Attributes:
        target_attributes: Number of best attributes to keep.
        algorithm: One of 'combined', 'main-effects-only', 'interaction-only'.
        remove_n: Attributes evaporated per iteration.
        remove_percent: When set, overrides remove_n with a percentage of the
            current working attribute count.
        interaction_remove_n: Attributes dropped per internal ReliefF iteration.
            Zero (with no percentage) selects single-pass ReliefF.
        interaction_remove_percent: Percentage alternative to interaction_remove_n.
        main_effects_threads: Worker hint for the tree ensemble (0 = all processors).
        interaction_threads: Worker hint for ReliefF (0 = all processors).
        temperature: T in F = E - T*S. Held constant across iterations.
        num_trees: Trees grown by the tree ensemble each iteration.
        importance_measure: 'auto', 'gini' or 'permutation'.
        k_nearest_neighbors: Neighbors used by ReliefF/RReliefF.
        num_instances_to_sample: ReliefF sample size m (0 = all instances).
        seed: Random seed shared by both learners.
        out_files_prefix: Prefix for importance and result files.
        work_dir: Directory receiving the tree ensemble's importance file.
        diagnostics: Log per-iteration score tables and Kendall taus.
    """
    target_attributes: int
    algorithm: str = constants.MODE_COMBINED
    remove_n: int = 1
    remove_percent: Optional[float] = None
    interaction_remove_n: int = 0
    interaction_remove_percent: Optional[float] = None
    main_effects_threads: int = 0
    interaction_threads: int = 0
    temperature: float = 1.0
    num_trees: int = 1000
    importance_measure: str = "auto"
    k_nearest_neighbors: int = 10
    num_instances_to_sample: int = 0
    seed: int = 42
    out_files_prefix: str = "ec"
    work_dir: str = "."
    diagnostics: bool = False

    def __post_init__(self):
        if self.target_attributes is None or int(self.target_attributes) < 1:
            raise ConfigurationError(
                f"target_attributes must be >= 1, got {self.target_attributes}."
            )

        algorithm = str(self.algorithm).strip().lower()
        if algorithm not in constants.ALGORITHM_MODES:
            raise ConfigurationError(
                f"algorithm must be one of {constants.ALGORITHM_MODES}, got '{self.algorithm}'."
            )
        object.__setattr__(self, 'algorithm', algorithm)

        if self.remove_percent is not None:
            if not (0 < self.remove_percent <= 100):
                raise ConfigurationError(f"remove_percent must be in (0, 100], got {self.remove_percent}.")
        elif self.remove_n < 1:
            raise ConfigurationError(f"remove_n must be >= 1, got {self.remove_n}.")

        if self.interaction_remove_n < 0:
            raise ConfigurationError(f"interaction_remove_n must be >= 0, got {self.interaction_remove_n}.")
        if self.interaction_remove_percent is not None and not (0 < self.interaction_remove_percent <= 100):
            raise ConfigurationError(
                f"interaction_remove_percent must be in (0, 100], got {self.interaction_remove_percent}."
            )

        for key in ('main_effects_threads', 'interaction_threads', 'num_instances_to_sample'):
            if getattr(self, key) < 0:
                raise ConfigurationError(f"{key} must be >= 0, got {getattr(self, key)}.")
        if self.temperature <= 0:
            raise ConfigurationError(f"temperature must be > 0, got {self.temperature}.")
        if self.num_trees < 1:
            raise ConfigurationError(f"num_trees must be >= 1, got {self.num_trees}.")
        if self.k_nearest_neighbors < 1:
            raise ConfigurationError(f"k_nearest_neighbors must be >= 1, got {self.k_nearest_neighbors}.")
        if self.importance_measure not in IMPORTANCE_MEASURES:
            raise ConfigurationError(
                f"importance_measure must be one of {IMPORTANCE_MEASURES}, got '{self.importance_measure}'."
            )

    # --- Mode helpers ---

    @property
    def uses_main_effects(self) -> bool:
        return self.algorithm in (constants.MODE_COMBINED, constants.MODE_MAIN_EFFECTS_ONLY)

    @property
    def uses_interaction(self) -> bool:
        return self.algorithm in (constants.MODE_COMBINED, constants.MODE_INTERACTION_ONLY)

    @property
    def interaction_iterative(self) -> bool:
        return self.interaction_remove_n > 0 or bool(self.interaction_remove_percent)

    def num_to_remove(self, num_working: int) -> int:
        """Attributes to evaporate this iteration, before clamping to the target."""
        if self.remove_percent is not None:
            return int((self.remove_percent / 100.0) * num_working)
        return self.remove_n

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'ECConfiguration':
        """
        Build from the sectioned JSON configuration used by ConfigurationManager.
        """
        ec = config.get('evaporative_cooling', {})
        main_effects = config.get('main_effects', {})
        interaction = config.get('interaction', {})
        outputs = config.get('outputs', {})

        if 'target_attributes' not in ec:
            raise ConfigurationError("evaporative_cooling.target_attributes must be specified.")

        return cls(
            target_attributes=ec['target_attributes'],
            algorithm=ec.get('algorithm', constants.MODE_COMBINED),
            remove_n=ec.get('remove_n', 1),
            remove_percent=ec.get('remove_percent'),
            temperature=ec.get('temperature', 1.0),
            diagnostics=ec.get('diagnostics', False),
            seed=ec.get('seed', 42),
            main_effects_threads=main_effects.get('num_threads', 0),
            num_trees=main_effects.get('num_trees', 1000),
            importance_measure=main_effects.get('importance_measure', 'auto'),
            interaction_threads=interaction.get('num_threads', 0),
            interaction_remove_n=interaction.get('remove_n', 0),
            interaction_remove_percent=interaction.get('remove_percent'),
            k_nearest_neighbors=interaction.get('k_nearest_neighbors', 10),
            num_instances_to_sample=interaction.get('num_instances_to_sample', 0),
            out_files_prefix=outputs.get('out_files_prefix', 'ec'),
            work_dir=outputs.get('work_dir', outputs.get('base_results_dir', '.')),
        )
