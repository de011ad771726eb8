"""
Event Hub Diagnostics Deployer - CLI Entry Point.

Provisions a resource group, a Cosmos DB account, an Event Hubs namespace
with an event hub and an authorization rule, and a diagnostic setting that
streams the Cosmos DB account's logs and metrics to the event hub. Every
resource that was created is deleted again before the program exits.

Usage:
    diagnostics-deployer [--config config.json] [--debug]

Exit codes:
    0   provisioning succeeded (cleanup problems are logged only)
    1   provisioning failed; cleanup ran
    2   invalid configuration; nothing was created
    130 interrupted; cleanup ran
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from diagnostics_deployer import constants as CONSTANTS
from diagnostics_deployer.logger import logger, configure_logger, print_stack_trace
from diagnostics_deployer.core.config_loader import load_run_config
from diagnostics_deployer.core.context import RunConfig
from diagnostics_deployer.core.exceptions import InvalidConfiguration
from diagnostics_deployer.core.pipeline import PipelineResult, run_pipeline
from diagnostics_deployer.core.planner import plan_resources
from diagnostics_deployer.core.protocols import ResourceProvider
from diagnostics_deployer.providers.azure import AzureNaming, AzureProvider


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diagnostics-deployer",
        description="Provision Cosmos DB diagnostics streaming to Azure Event Hubs, then clean up."
    )
    parser.add_argument("--config", type=Path, help=f"Path to a JSON run configuration ({CONSTANTS.CONFIG_FILE})")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def create_provider(config: RunConfig) -> AzureProvider:
    """Create an AzureProvider with initialized SDK clients."""
    provider = AzureProvider()
    provider.initialize_clients(config.get_credentials())
    return provider


def run(config: RunConfig, provider: ResourceProvider, naming: Optional[AzureNaming] = None) -> PipelineResult:
    """
    Plan the resources for a config and run the provision-then-cleanup pipeline.

    Raises:
        InvalidConfiguration: If the plan is inconsistent (nothing is created)
    """
    naming = naming or AzureNaming.from_config(config)
    descriptors = plan_resources(config, naming)

    logger.info(f"========== Provisioning in {config.region} ==========")
    result = run_pipeline(provider, descriptors)

    if result.succeeded:
        logger.info("========== Run complete ==========")
    else:
        logger.error(f"========== Run failed: {result.error} ==========")
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the full provision-then-cleanup sequence and return the exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = load_run_config(args.config)
    except InvalidConfiguration as e:
        logger.error(str(e))
        return CONSTANTS.EXIT_INVALID_CONFIGURATION

    configure_logger("DEBUG" if args.debug else config.mode)

    try:
        provider = create_provider(config)
    except ValueError as e:
        logger.error(f"Could not initialize Azure clients: {e}")
        print_stack_trace()
        return CONSTANTS.EXIT_INVALID_CONFIGURATION

    try:
        result = run(config, provider)
    except InvalidConfiguration as e:
        logger.error(str(e))
        return CONSTANTS.EXIT_INVALID_CONFIGURATION
    except KeyboardInterrupt:
        logger.warning("Interrupted. Cleanup has been attempted for everything recorded.")
        return CONSTANTS.EXIT_INTERRUPTED

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
