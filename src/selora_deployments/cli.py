"""Command line entry points for selora-deployments library."""

import argparse
import logging
import os
from typing import Callable, List, Optional

from .config import ConstantsTable
from .constants import LOG_LEVEL_ENV
from .flows import deploy_core, deploy_integrations
from .ledger import Ledger, Web3Ledger
from .types import DeploymentState

logger = logging.getLogger(__name__)

Flow = Callable[[str, Ledger, ConstantsTable], DeploymentState]


def build_parser(prog: str, description: str) -> argparse.ArgumentParser:
    """Parser accepting exactly one required option, --network/-n."""
    parser = argparse.ArgumentParser(prog=prog, description=description, allow_abbrev=False)
    parser.add_argument(
        "-n",
        "--network",
        required=True,
        help="Network name, as used in the constants table",
    )
    return parser


def configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run(flow: Flow, prog: str, description: str, argv: Optional[List[str]]) -> int:
    args = build_parser(prog, description).parse_args(argv)
    configure_logging()

    try:
        constants_table = ConstantsTable.from_file()
        state = flow(args.network, Web3Ledger(), constants_table)
    except Exception:
        logger.exception("%s failed on network '%s'", prog, args.network)
        return 1

    logger.info("Routers: %s", ", ".join(state.routers))
    logger.info("SwapExecutor: %s", state.swap_executor)
    return 0


def deploy_core_main(argv: Optional[List[str]] = None) -> int:
    """Entry point for selora-deploy-core."""
    return _run(
        deploy_core,
        "selora-deploy-core",
        "Deploy the Selora routers and SwapExecutor and record their addresses.",
        argv,
    )


def deploy_integrations_main(argv: Optional[List[str]] = None) -> int:
    """Entry point for selora-deploy-integrations."""
    return _run(
        deploy_integrations,
        "selora-deploy-integrations",
        "Deploy new Selora routers and register them on the recorded SwapExecutor.",
        argv,
    )
