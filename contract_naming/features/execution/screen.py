"""Modal screen that runs naming steps and reports the outcome."""

from typing import cast

import pyperclip
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

from contract_naming.features.execution.service import (
    RunPhase,
    RunState,
    Step,
    StepExecutor,
    StepStatus,
)
from contract_naming.shared.logging import format_error_for_user, get_logger
from contract_naming.shared.protocols import SignerProtocol

logger = get_logger(__name__)


class BaseModalScreen(ModalScreen):
    BINDINGS = [
        ("escape", "close", "Close"),
        ("tab", "focus_next", "Next"),
        ("shift+tab", "focus_previous", "Previous"),
    ]


class SetNameStepsScreen(BaseModalScreen):
    """Shows each step with its status and dismisses with the run outcome.

    The dismiss value is the last transaction hash on success, ``"INCOMPLETE"``
    when closed early, or ``"ERROR: <message>"`` after a failed step.
    Running icons and retry only apply to signers that confirm transactions;
    a batched signer marks every step completed as soon as the run starts.
    """

    BINDINGS = BaseModalScreen.BINDINGS + [("r", "retry", "Retry")]

    def __init__(
        self,
        steps: list[Step],
        signer: SignerProtocol,
        title: str,
        subtitle: str = "",
        preview: str = "",
    ):
        super().__init__()
        self.steps = steps
        self.signer = signer
        self.title_text = title
        self.subtitle_text = subtitle
        self.preview = preview
        self.executor = StepExecutor(steps, signer, on_change=self._refresh)

    def compose(self) -> ComposeResult:
        yield Label(f"🏷️ {self.title_text}", id="steps-title")
        if self.subtitle_text:
            yield Label(self.subtitle_text, id="steps-subtitle")
        if self.executor.batched:
            yield Label(
                "Calls were queued for your multisig wallet. Execute them there in this order.",
                id="batched-note",
            )
        yield Vertical(
            *(
                Static(self._step_line(i, StepStatus.PENDING, False), id=f"step-{i}")
                for i in range(len(self.steps))
            ),
            id="steps-list",
        )
        yield Label("", id="status-label")
        yield Horizontal(
            Button("🔁 Retry", id="retry-button", disabled=True),
            Button("📋 Copy", id="copy-button"),
            Button("❌ Close", id="close-button", variant="primary"),
        )

    def on_mount(self) -> None:
        self.run_worker(self.executor.start(), exclusive=True)

    def _step_line(self, index: int, status: StepStatus, running: bool) -> str:
        if status == StepStatus.COMPLETED:
            icon = "✅"
        elif status == StepStatus.ERROR:
            icon = "❌"
        elif running:
            icon = "⏳"
        else:
            icon = f"{index + 1}."
        return f"{icon} {self.steps[index].title}"

    def _refresh(self, state: RunState) -> None:
        for i, status in enumerate(state.statuses):
            running = state.executing and state.current == i
            line = cast(Static, self.query_one(f"#step-{i}"))
            line.update(self._step_line(i, status, running))

        status_label = cast(Label, self.query_one("#status-label"))
        retry_button = cast(Button, self.query_one("#retry-button"))
        retry_button.disabled = state.phase != RunPhase.AWAITING_RETRY

        if state.phase == RunPhase.ALL_COMPLETED:
            status_label.update("All steps completed.")
        elif state.phase == RunPhase.HALTED:
            status_label.update(f"❌ {format_error_for_user(state.error_message or '')}")
        elif state.phase == RunPhase.AWAITING_RETRY:
            status_label.update("Request rejected in wallet. Press Retry to try again.")
        else:
            status_label.update("")

    def action_retry(self) -> None:
        if self.executor.state.phase == RunPhase.AWAITING_RETRY:
            self.run_worker(self.executor.retry(), exclusive=True)

    def action_close(self) -> None:
        result = self.executor.close()
        logger.info("Closing steps screen with %s", result.kind.value)
        self.dismiss(result.as_outcome())

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "retry-button":
            self.action_retry()
        elif event.button.id == "copy-button":
            text = self.executor.state.last_tx_hash or self.preview
            if not text:
                self.notify("Nothing to copy yet", severity="warning")
                return
            pyperclip.copy(text)
            self.notify("Copied to clipboard!", severity="information")
        elif event.button.id == "close-button":
            self.action_close()
