#!/usr/bin/env python
"""
Evaporative Cooling Feature Selection - Main Entry Point
Loads a dataset, runs the Evaporative Cooling loop and writes the ranked survivors.
"""
import sys
import logging
import argparse
import traceback
import random
from pathlib import Path

import numpy as np

from evaporative_cooling.config_manager import ConfigurationManager
from evaporative_cooling.logging_config import LoggingConfigurator
from evaporative_cooling.data_manager import DataManager
from evaporative_cooling.ec import ECController
from evaporative_cooling.reporting_engine import results_filename, write_scores
from evaporative_cooling.utils.exceptions import EvaporativeCoolingException
from evaporative_cooling.utils.file_io import save_dataframe
from evaporative_cooling.utils import constants


def parse_arguments(argv=None):
    """
    Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    parser = argparse.ArgumentParser(
        description="Evaporative Cooling feature selection",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        "--config",
        type=str,
        default="config/config.json",
        help="Path to the configuration JSON file"
    )

    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="Data file to load (overrides data.file_path)"
    )

    parser.add_argument(
        "--out-prefix",
        type=str,
        default=None,
        help="Prefix for result files (overrides outputs.out_files_prefix)"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration and setup without running Evaporative Cooling"
    )

    return parser.parse_args(argv)


def cli_overrides(args: argparse.Namespace) -> dict:
    """Configuration values given on the command line, grouped by section."""
    overrides = {}
    if args.verbose:
        overrides['logging'] = {'level': 'DEBUG'}
    if args.data:
        overrides['data'] = {'file_path': args.data}
    if args.out_prefix:
        overrides['outputs'] = {'out_files_prefix': args.out_prefix}
    return overrides


def setup_global_determinism(seed: int, logger: logging.Logger):
    logger.info(f"Setting Global Deterministic Seed: {seed}")
    random.seed(seed)
    np.random.seed(seed)


def setup_run_directory(config: dict, logger: logging.Logger) -> Path:
    """Create the results directory tree and return its absolute path."""
    run_dir = Path(config.get('outputs', {}).get('base_results_dir', 'results')).absolute()
    for sub_dir in constants.TOP_LEVEL_RESULT_DIRS:
        (run_dir / sub_dir).mkdir(parents=True, exist_ok=True)
    logger.info(f"Results directory: {run_dir}")
    return run_dir


def main(argv=None):
    """
    Run Evaporative Cooling end to end.

    Returns:
        int: Exit code (0 for success, 1 for errors, 130 when interrupted)
    """
    logger = None

    try:
        args = parse_arguments(argv)

        print("\n" + "=" * 80)
        print("    EVAPORATIVE COOLING FEATURE SELECTION")
        print("=" * 80 + "\n")

        # ---------------------------------------------------------------
        # PHASE 0: INITIALIZATION & VALIDATION
        # ---------------------------------------------------------------
        config_manager = ConfigurationManager(config_path=args.config)
        config = config_manager.load_and_validate(overrides=cli_overrides(args))

        logging_configurator = LoggingConfigurator(config)
        logging_configurator.setup()
        logger = logging_configurator.get_logger('evaporative_cooling')

        logger.info(f"Configuration loaded from: {args.config}")

        run_dir = setup_run_directory(config, logger)
        config['outputs']['base_results_dir'] = str(run_dir)
        config['outputs'].setdefault('work_dir', str(run_dir / constants.LEARNER_WORK_DIR))

        ec_config = config_manager.build_ec_configuration()
        run_id = config_manager.generate_run_id()
        config_manager.save_artifacts(str(run_dir))
        setup_global_determinism(ec_config.seed, logger)

        logger.info(f"Run ID: {run_id}")

        if args.dry_run:
            logger.info("Dry run mode: validation complete. Exiting without running Evaporative Cooling.")
            print("\n[SUCCESS] Configuration validated successfully.")
            return 0

        # ---------------------------------------------------------------
        # PHASE 1: DATA INGESTION
        # ---------------------------------------------------------------
        logger.info("\n" + "=" * 60)
        logger.info("PHASE 1: DATA INGESTION")
        logger.info("=" * 60)

        dataset = DataManager(config, logger).execute()

        # ---------------------------------------------------------------
        # PHASE 2: EVAPORATIVE COOLING
        # ---------------------------------------------------------------
        logger.info("\n" + "=" * 60)
        logger.info("PHASE 2: EVAPORATIVE COOLING")
        logger.info("=" * 60)

        controller = ECController(dataset, ec_config, logger)
        ec_scores = controller.run()

        # ---------------------------------------------------------------
        # PHASE 3: RESULTS
        # ---------------------------------------------------------------
        outputs = config.get('outputs', {})
        results_path = write_scores(
            ec_scores,
            run_dir / constants.SCORES_DIR / results_filename(ec_config.out_files_prefix, ec_config.algorithm),
        )
        logger.info(f"Writing scores to [{results_path}]")

        if outputs.get('save_history', True):
            excel_copy = outputs.get('save_excel_copy', False)
            history_dir = run_dir / constants.HISTORY_DIR
            save_dataframe(controller.get_iteration_history(),
                           history_dir / constants.ITERATION_HISTORY_FILE, excel_copy=excel_copy)
            save_dataframe(controller.get_evaporated_attributes().to_frame(),
                           history_dir / constants.EVAPORATED_ATTRIBUTES_FILE, excel_copy=excel_copy)

        logger.info("\n" + "-" * 60)
        logger.info("EVAPORATIVE COOLING COMPLETED SUCCESSFULLY")
        logger.info(f"Iterations: {controller.iterations_run}")
        logger.info(f"Selected attributes: {ec_scores.names}")
        logger.info("-" * 60 + "\n")

        print(f"\n[SUCCESS] Evaporative Cooling completed. Results saved to: {results_path}")
        return 0

    except EvaporativeCoolingException as e:
        msg = f"Evaporative Cooling Error: {str(e)}"
        print(f"\n[ERROR] {msg}")
        if logger:
            logger.critical(msg, exc_info=True)
        else:
            traceback.print_exc()
        return 1

    except KeyboardInterrupt:
        print("\n[INTERRUPTED] Evaporative Cooling interrupted by user.")
        if logger:
            logger.warning("Run interrupted by user (Ctrl+C)")
        return 130

    except Exception as e:
        msg = f"Unexpected Error: {str(e)}"
        print(f"\n[CRITICAL] {msg}")
        if logger:
            logger.critical(msg, exc_info=True)
        else:
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
