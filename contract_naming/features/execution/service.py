"""Sequential execution of planned naming steps."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable

from contract_naming.shared.protocols import SignerProtocol

logger = logging.getLogger(__name__)

SAFE_WALLET_TX = "safe wallet"
INCOMPLETE = "INCOMPLETE"
ERROR_PREFIX = "ERROR: "

REJECTION_CODES = {4001, "4001", "ACTION_REJECTED"}

StepAction = Callable[[], Awaitable["str | None"]]


class UserRejectedError(Exception):
    code = "ACTION_REJECTED"

    def __init__(self, message: str = "User rejected the request"):
        super().__init__(message)


def is_user_rejection(error: BaseException) -> bool:
    """Whether ``error`` (or an error it was explicitly raised from) is a wallet rejection."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, UserRejectedError):
            return True
        if getattr(current, "code", None) in REJECTION_CODES:
            return True
        current = current.__cause__
    return False


class StepStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class Step:
    title: str
    chain_id: int
    action: StepAction


class ResultKind(Enum):
    SUCCESS = "success"
    INCOMPLETE = "incomplete"
    ERROR = "error"


@dataclass(frozen=True)
class ExecutionResult:
    kind: ResultKind
    tx_hash: str | None = None
    message: str | None = None

    @classmethod
    def success(cls, tx_hash: str | None) -> "ExecutionResult":
        return cls(ResultKind.SUCCESS, tx_hash=tx_hash)

    @classmethod
    def incomplete(cls) -> "ExecutionResult":
        return cls(ResultKind.INCOMPLETE)

    @classmethod
    def error(cls, message: str) -> "ExecutionResult":
        return cls(ResultKind.ERROR, message=message)

    def as_outcome(self) -> str | None:
        """Outcome string handed to the caller when the run is closed."""
        if self.kind == ResultKind.SUCCESS:
            return self.tx_hash
        if self.kind == ResultKind.ERROR:
            return f"{ERROR_PREFIX}{self.message}"
        return INCOMPLETE


class RunPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    AWAITING_RETRY = "awaiting_retry"
    ALL_COMPLETED = "all_completed"
    HALTED = "halted"


@dataclass
class RunState:
    statuses: list[StepStatus]
    tx_hashes: list[str | None]
    current: int = 0
    executing: bool = False
    phase: RunPhase = RunPhase.IDLE
    last_tx_hash: str | None = None
    error_message: str | None = None
    closed: bool = False
    receipts: list[Any] = field(default_factory=list)

    @classmethod
    def for_steps(cls, count: int) -> "RunState":
        return cls(
            statuses=[StepStatus.PENDING] * count,
            tx_hashes=[None] * count,
        )

    @property
    def all_completed(self) -> bool:
        return self.phase == RunPhase.ALL_COMPLETED


class StepExecutor:
    """Runs steps strictly one after another.

    The first step starts with `start()`; each following step starts as soon
    as the previous one completes. A wallet rejection puts the step back to
    pending and pauses the run until `retry()`. Any other failure marks the
    step as error and halts the run. With a batched signer every step is
    marked completed up front and no action is invoked.
    """

    def __init__(
        self,
        steps: list[Step],
        signer: SignerProtocol,
        batched: bool | None = None,
        on_change: Callable[[RunState], None] | None = None,
        on_close: Callable[[ExecutionResult], None] | None = None,
    ):
        self.steps = list(steps)
        self.signer = signer
        self.batched = signer.is_batched if batched is None else batched
        self.on_change = on_change
        self.on_close = on_close
        self.state = RunState.for_steps(len(self.steps))

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self.state)

    async def start(self) -> RunState:
        if self.state.phase != RunPhase.IDLE:
            return self.state

        if self.batched:
            self.state.statuses = [StepStatus.COMPLETED] * len(self.steps)
            self.state.current = len(self.steps)
            self.state.phase = RunPhase.ALL_COMPLETED
            logger.info("Batched signer: %d steps queued for joint execution", len(self.steps))
            self._notify()
            return self.state

        if not self.steps:
            self.state.phase = RunPhase.ALL_COMPLETED
            self._notify()
            return self.state

        self.state.phase = RunPhase.RUNNING
        await self._run_from(0)
        return self.state

    async def retry(self) -> RunState:
        """Re-attempt the current step after a wallet rejection."""
        if self.state.phase != RunPhase.AWAITING_RETRY or self.state.executing:
            return self.state
        self.state.phase = RunPhase.RUNNING
        await self._run_from(self.state.current)
        return self.state

    async def _run_from(self, index: int) -> None:
        while index < len(self.steps) and not self.state.closed:
            if index > 0 and self.state.statuses[index - 1] != StepStatus.COMPLETED:
                return
            if not await self._run_step(index):
                return
            index += 1

        if index >= len(self.steps) and not self.state.closed:
            self.state.phase = RunPhase.ALL_COMPLETED
            logger.info("All %d steps completed", len(self.steps))
            self._notify()

    async def _run_step(self, index: int) -> bool:
        if self.state.executing:
            return False

        step = self.steps[index]
        self.state.current = index
        self.state.executing = True
        self._notify()
        logger.info("Running step %d/%d: %s", index + 1, len(self.steps), step.title)

        try:
            tx = await step.action()
            tx_hash = None
            if tx:
                tx_hash = tx
                if tx != SAFE_WALLET_TX:
                    receipt = await self.signer.await_confirmation(tx)
                    self.state.receipts.append(receipt)
                self.state.tx_hashes[index] = tx_hash
                self.state.last_tx_hash = tx_hash
            self.state.statuses[index] = StepStatus.COMPLETED
            if index + 1 < len(self.steps):
                self.state.current = index + 1
            else:
                self.state.current = len(self.steps)
            return True
        except Exception as e:
            if is_user_rejection(e):
                logger.info("Step %d rejected in wallet, awaiting retry", index + 1)
                self.state.statuses[index] = StepStatus.PENDING
                self.state.phase = RunPhase.AWAITING_RETRY
            else:
                logger.error("Step %d failed: %s", index + 1, e)
                self.state.statuses[index] = StepStatus.ERROR
                self.state.error_message = str(e) or type(e).__name__
                self.state.phase = RunPhase.HALTED
            return False
        finally:
            self.state.executing = False
            self._notify()

    @property
    def result(self) -> ExecutionResult:
        if self.state.error_message:
            return ExecutionResult.error(self.state.error_message)
        if self.state.all_completed:
            return ExecutionResult.success(self.state.last_tx_hash)
        return ExecutionResult.incomplete()

    def close(self) -> ExecutionResult:
        """Stop starting new steps and report the terminal result once.

        Transactions already submitted keep going on chain.
        """
        if self.state.closed:
            return self.result
        self.state.closed = True
        result = self.result
        logger.info("Run closed with %s", result.kind.value)
        if self.on_close:
            self.on_close(result)
        return result
