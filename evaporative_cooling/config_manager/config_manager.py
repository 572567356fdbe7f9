import json
import os
import hashlib
import sys
import logging
import jsonschema
import psutil
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional

from evaporative_cooling.config_manager.ec_configuration import ECConfiguration
from evaporative_cooling.utils.exceptions import ConfigurationError
from evaporative_cooling.utils import constants


class ConfigurationManager:
    """
    Manages system configuration loading, validation, and access.
    Acts as the single source of truth for a run; the typed ECConfiguration
    handed to the controller is built from the validated dictionary.
    """

    def __init__(self, config_path: str = "config/config.json",
                 schema_path: str = "config/schema.json"):
        """
        Initialize the ConfigurationManager.

        Args:
            config_path (str): Path to the user configuration JSON.
            schema_path (str): Path to the JSON schema definition.
        """
        self.config_path = config_path
        self.schema_path = schema_path
        self.config: Dict[str, Any] = {}
        self.schema: Dict[str, Any] = {}
        self.run_id: Optional[str] = None
        self.logger = logging.getLogger("config_manager")

    def load_and_validate(self, overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Main entry point. Loads config, applies overrides, validates schema, logic and resources.

        Args:
            overrides: Per-section values (e.g. from the command line) that replace
                the file's values before any validation runs.

        Returns:
            Dict[str, Any]: The validated configuration.

        Raises:
            ConfigurationError: If any validation step fails.
        """
        # 1. Load Files
        self.config = self._load_json(self.config_path)
        self.schema = self._load_json(self.schema_path)
        self._apply_overrides(overrides or {})

        # 2. Structural Validation (Schema)
        self._validate_schema()

        # 3. Logical Validation (Business Rules & Bounds)
        self._validate_logic()

        # 4. Resource Validation (thread hints vs. available processors)
        self._validate_resources()

        return self.config

    def build_ec_configuration(self) -> ECConfiguration:
        """Convert the validated dictionary into the typed configuration."""
        if not self.config:
            raise ConfigurationError("Configuration not loaded. Call load_and_validate() first.")
        return ECConfiguration.from_dict(self.config)

    def generate_run_id(self) -> str:
        """
        Generate or retrieve a unique run identifier based on timestamp.
        """
        if not self.run_id:
            self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.run_id

    def save_artifacts(self, output_dir: str) -> None:
        """
        Save configuration artifacts to the run directory for reproducibility.

        Saves:
        1. config_used.json: The exact config object in memory.
        2. config_hash.txt: SHA256 hash for versioning.
        3. run_metadata.json: Environment details (Python version, Platform, etc.).
        """
        config_dir = Path(output_dir) / constants.CONFIG_DIR
        config_dir.mkdir(parents=True, exist_ok=True)

        with open(config_dir / constants.CONFIG_USED_FILE, 'w') as f:
            json.dump(self.config, f, indent=2)

        config_str = json.dumps(self.config, sort_keys=True)
        config_hash = hashlib.sha256(config_str.encode()).hexdigest()

        with open(config_dir / constants.CONFIG_HASH_FILE, 'w') as f:
            f.write(config_hash)

        metadata = {
            'run_id': self.run_id,
            'start_time': datetime.now().isoformat(),
            'python_version': sys.version,
            'platform': sys.platform,
            'config_hash': config_hash,
            'working_directory': os.getcwd()
        }

        with open(config_dir / constants.RUN_METADATA_FILE, 'w') as f:
            json.dump(metadata, f, indent=2)

    def _load_json(self, path: str) -> Dict[str, Any]:
        """Safely load a JSON file."""
        if not os.path.exists(path):
            raise ConfigurationError(f"File not found: {path}")
        try:
            with open(path, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {str(e)}")

    def _apply_overrides(self, overrides: Dict[str, Dict[str, Any]]) -> None:
        for section, values in overrides.items():
            self.config.setdefault(section, {}).update(values)

    def _validate_schema(self) -> None:
        """Validate config structure against JSON schema."""
        try:
            jsonschema.validate(instance=self.config, schema=self.schema)
        except jsonschema.ValidationError as e:
            raise ConfigurationError(f"Schema validation failed: {e.message}")

    def _validate_logic(self) -> None:
        """Logical validation the schema cannot express."""
        # --- Data Section ---
        data = self.config.get('data', {})
        if not data.get('file_path'):
            raise ConfigurationError("Data 'file_path' must be specified and non-empty.")
        phenotype = data.get('phenotype_column', constants.DEFAULT_PHENOTYPE_COLUMN)
        if phenotype in data.get('drop_columns', []):
            raise ConfigurationError(f"Phenotype column '{phenotype}' cannot also be dropped.")

        # --- Evaporative Cooling Section ---
        ec = self.config.get('evaporative_cooling', {})
        if ec.get('target_attributes', 0) < 1:
            raise ConfigurationError(
                f"evaporative_cooling.target_attributes must be >= 1, got {ec.get('target_attributes')}."
            )
        algorithm = str(ec.get('algorithm', constants.MODE_COMBINED)).lower()
        if algorithm not in constants.ALGORITHM_MODES:
            raise ConfigurationError(
                f"evaporative_cooling.algorithm must be one of {constants.ALGORITHM_MODES}, got '{algorithm}'."
            )
        for section in ('evaporative_cooling', 'interaction'):
            percent = self.config.get(section, {}).get('remove_percent')
            if percent is not None and not (0 < percent <= 100):
                raise ConfigurationError(f"{section}.remove_percent must be in (0, 100], got {percent}.")

        # --- Interaction Section ---
        interaction = self.config.get('interaction', {})
        if interaction.get('k_nearest_neighbors', 10) < 1:
            raise ConfigurationError("interaction.k_nearest_neighbors must be >= 1.")

    def _validate_resources(self) -> None:
        """
        Warn when thread hints exceed the processors on this machine.
        The controller clamps them; this only makes the substitution visible.
        """
        max_threads = psutil.cpu_count(logical=True) or 1
        for section in ('main_effects', 'interaction'):
            threads = self.config.get(section, {}).get('num_threads', 0)
            if threads > max_threads:
                self.logger.warning(
                    f"{section}.num_threads ({threads}) exceeds available processors ({max_threads}). "
                    f"{max_threads} threads will be used."
                )
