"""Main application entry point for contract naming."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import cast

from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from contract_naming.chains import (
    SECONDARY_NETWORKS,
    ChainId,
    get_chain_name,
    is_primary_naming_chain,
)
from contract_naming.config import NamingConfig
from contract_naming.features.batching import (
    NamingValidationError,
    load_csv,
    write_template,
)
from contract_naming.features.execution import DeferredBatchSigner, SetNameStepsScreen
from contract_naming.features.planning import (
    BatchNamingService,
    NamingPlan,
    PlanningError,
    PlanningOptions,
)
from contract_naming.network import NetworkError
from contract_naming.reader import JsonRpcStateReader
from contract_naming.shared.logging import format_error_for_user, get_logger, setup_logging
from contract_naming.shared.protocols import SignerProtocol
from contract_naming.shared.transaction_queue import TransactionQueue
from contract_naming.styles import CSS

logger = get_logger(__name__)


class BatchNamingApp(App):
    """Plans a naming run and shows the steps.

    Without an explicit ``signer`` the calls are queued for a multisig wallet
    through ``DeferredBatchSigner``; a signer that broadcasts and confirms
    transactions drives the steps one by one instead.
    """

    CSS = CSS
    BINDINGS = [("q", "quit", "Quit")]

    def __init__(
        self,
        args: argparse.Namespace,
        config: NamingConfig,
        signer: SignerProtocol | None = None,
    ):
        super().__init__()
        self.args = args
        self.config = config
        self.outcome: str | None = None
        self.signer: SignerProtocol = signer or DeferredBatchSigner(
            address=args.wallet,
            chain_id=args.chain,
            queue=TransactionQueue(config.queue_dir),
        )
        self.service = BatchNamingService(config, self.signer, JsonRpcStateReader(config))

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Preparing naming plan...", id="plan-status")
        yield Footer()

    def on_mount(self) -> None:
        self.title = f"Contract naming on {get_chain_name(self.args.chain)}"
        self.run_worker(self._prepare(), exclusive=True)

    def _set_status(self, text: str) -> None:
        cast(Static, self.query_one("#plan-status")).update(text)

    async def _build_plan(self) -> NamingPlan:
        options = PlanningOptions(
            skip_primary_naming=self.args.skip_primary,
            secondary_networks=tuple(self.args.secondary or ()),
        )
        if self.args.address:
            return await self.service.prepare_existing_name(
                self.args.address, self.args.name, self.args.chain, options
            )

        imported = load_csv(self.args.csv)
        if not imported.ok:
            raise NamingValidationError("; ".join(str(e) for e in imported.errors))
        return await self.service.prepare(
            imported.requests, self.args.parent, self.args.chain, options
        )

    async def _prepare(self) -> None:
        try:
            plan = await self._build_plan()
            if isinstance(self.signer, DeferredBatchSigner):
                await self.signer.queue_calls(await self.service.priced_calls(plan))
        except (NamingValidationError, PlanningError) as e:
            logger.warning("Planning failed: %s", e)
            self._set_status(f"❌ {e}")
            self.outcome = f"ERROR: {e}"
            return
        except NetworkError as e:
            logger.error("Network error while planning: %s", e)
            self._set_status(f"❌ {format_error_for_user(e)}")
            self.outcome = f"ERROR: {e}"
            return

        self._set_status(f"{plan.title} ({plan.subtitle})")
        self.push_screen(
            SetNameStepsScreen(
                plan.steps,
                self.signer,
                title=plan.title,
                subtitle=plan.subtitle,
                preview=plan.preview(),
            ),
            callback=self._on_steps_closed,
        )

    def _on_steps_closed(self, outcome: str | None) -> None:
        self.outcome = outcome
        logger.info("Naming run finished: %s", outcome)
        self.exit(outcome)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contract-naming",
        description="Name one or many contracts and queue the calls for a multisig wallet.",
    )
    parser.add_argument("csv", nargs="?", help="CSV file with address,name rows")
    parser.add_argument("--parent", help="Parent domain the names are created under")
    parser.add_argument("--wallet", help="Address of the multisig wallet that will execute")
    parser.add_argument(
        "--chain",
        type=int,
        default=ChainId.SEPOLIA,
        help="Primary naming chain id (default: Sepolia)",
    )
    parser.add_argument(
        "--secondary",
        action="append",
        choices=sorted(SECONDARY_NETWORKS),
        help="Also set reverse records on this network (repeatable)",
    )
    parser.add_argument(
        "--skip-primary",
        action="store_true",
        help="Skip forward and reverse records on the primary chain",
    )
    parser.add_argument("--address", help="Name a single contract with an existing name")
    parser.add_argument("--name", help="Existing full name used with --address")
    parser.add_argument("--template", metavar="PATH", help="Write a CSV template and exit")
    parser.add_argument("--config-dir", help="Directory holding config.json")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.template:
        path = write_template(Path(args.template))
        print(f"Template written to {path}")
        return 0

    config = NamingConfig.load(args.config_dir)
    args.parent = args.parent or config.default_parent

    if not args.wallet:
        parser.error("--wallet is required")
    if args.address and not args.name:
        parser.error("--name is required with --address")
    if not args.address and not (args.csv and args.parent):
        parser.error("a CSV file and --parent are required")
    if not is_primary_naming_chain(args.chain):
        parser.error(f"chain {args.chain} cannot host primary names")

    setup_logging()
    if not config.config_file.exists():
        config.save()
    logger.info("Starting contract naming on chain %d", args.chain)

    app = BatchNamingApp(args, config)
    app.run()
    if app.outcome:
        print(app.outcome)
    return 1 if (app.outcome or "").startswith("ERROR") else 0


if __name__ == "__main__":
    sys.exit(main())
