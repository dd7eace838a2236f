"""Tests for the step executor state machine."""

from __future__ import annotations

import pytest

from contract_naming.features.execution import (
    INCOMPLETE,
    SAFE_WALLET_TX,
    ExecutionResult,
    ResultKind,
    RunPhase,
    Step,
    StepExecutor,
    StepStatus,
    UserRejectedError,
    is_user_rejection,
)


class RpcRejection(Exception):
    def __init__(self, code):
        super().__init__("rejected")
        self.code = code


def recording_step(log, name, result="0xhash", chain_id=11155111):
    async def action():
        log.append(name)
        return f"{result}-{name}" if result else result

    return Step(title=name, chain_id=chain_id, action=action)


def failing_step(log, name, error):
    async def action():
        log.append(name)
        raise error

    return Step(title=name, chain_id=11155111, action=action)


@pytest.mark.unit
class TestRejectionDetection:
    def test_user_rejected_error(self):
        assert is_user_rejection(UserRejectedError())

    def test_rejection_codes(self):
        assert is_user_rejection(RpcRejection(4001))
        assert is_user_rejection(RpcRejection("ACTION_REJECTED"))
        assert not is_user_rejection(RpcRejection(-32000))

    def test_wrapped_rejection(self):
        try:
            try:
                raise RpcRejection(4001)
            except RpcRejection as e:
                raise RuntimeError("send failed") from e
        except RuntimeError as wrapped:
            assert is_user_rejection(wrapped)

    def test_error_raised_while_handling_rejection(self):
        try:
            try:
                raise UserRejectedError()
            except UserRejectedError:
                raise RuntimeError("execution reverted")
        except RuntimeError as error:
            assert not is_user_rejection(error)

    def test_plain_error(self):
        assert not is_user_rejection(ValueError("boom"))


@pytest.mark.unit
class TestExecutionResult:
    def test_outcomes(self):
        assert ExecutionResult.success("0xabc").as_outcome() == "0xabc"
        assert ExecutionResult.error("boom").as_outcome() == "ERROR: boom"
        assert ExecutionResult.incomplete().as_outcome() == INCOMPLETE


@pytest.mark.unit
class TestStepExecutor:
    @pytest.mark.asyncio
    async def test_runs_all_steps_in_order(self, fake_signer):
        log: list[str] = []
        steps = [recording_step(log, f"s{i}") for i in range(3)]
        executor = StepExecutor(steps, fake_signer)

        state = await executor.start()

        assert log == ["s0", "s1", "s2"]
        assert state.statuses == [StepStatus.COMPLETED] * 3
        assert state.phase == RunPhase.ALL_COMPLETED
        assert fake_signer.confirmed == ["0xhash-s0", "0xhash-s1", "0xhash-s2"]
        assert executor.result == ExecutionResult.success("0xhash-s2")

    @pytest.mark.asyncio
    async def test_batched_mode_marks_completed_without_actions(self, fake_signer):
        log: list[str] = []
        steps = [recording_step(log, f"s{i}") for i in range(4)]
        executor = StepExecutor(steps, fake_signer, batched=True)

        state = await executor.start()

        assert log == []
        assert state.statuses == [StepStatus.COMPLETED] * 4
        assert state.tx_hashes == [None] * 4
        assert executor.result.kind == ResultKind.SUCCESS
        assert executor.result.tx_hash is None

    @pytest.mark.asyncio
    async def test_batched_mode_follows_signer(self, fake_signer):
        fake_signer.batched = True
        log: list[str] = []
        executor = StepExecutor([recording_step(log, "s0")], fake_signer)
        await executor.start()
        assert log == []
        assert executor.state.all_completed

    @pytest.mark.asyncio
    async def test_error_halts_run(self, fake_signer):
        log: list[str] = []
        steps = [
            recording_step(log, "s0"),
            failing_step(log, "s1", RuntimeError("execution reverted")),
            recording_step(log, "s2"),
            recording_step(log, "s3"),
        ]
        executor = StepExecutor(steps, fake_signer)

        state = await executor.start()

        assert log == ["s0", "s1"]
        assert state.statuses == [
            StepStatus.COMPLETED,
            StepStatus.ERROR,
            StepStatus.PENDING,
            StepStatus.PENDING,
        ]
        assert state.phase == RunPhase.HALTED
        assert executor.result == ExecutionResult.error("execution reverted")
        assert executor.close().as_outcome() == "ERROR: execution reverted"

    @pytest.mark.asyncio
    async def test_failure_after_rejection_halts_run(self, fake_signer):
        async def action():
            try:
                raise UserRejectedError()
            except UserRejectedError:
                raise RuntimeError("execution reverted")

        executor = StepExecutor([Step("s0", 11155111, action)], fake_signer)

        state = await executor.start()

        assert state.statuses == [StepStatus.ERROR]
        assert state.phase == RunPhase.HALTED
        assert executor.result == ExecutionResult.error("execution reverted")

    @pytest.mark.asyncio
    async def test_rejection_pauses_then_retry_resumes(self, fake_signer):
        log: list[str] = []
        attempts = {"count": 0}

        async def flaky():
            attempts["count"] += 1
            log.append("s1")
            if attempts["count"] == 1:
                raise UserRejectedError()
            return "0xhash-s1"

        steps = [
            recording_step(log, "s0"),
            Step(title="s1", chain_id=11155111, action=flaky),
            recording_step(log, "s2"),
        ]
        executor = StepExecutor(steps, fake_signer)

        state = await executor.start()
        assert state.phase == RunPhase.AWAITING_RETRY
        assert state.current == 1
        assert state.statuses == [StepStatus.COMPLETED, StepStatus.PENDING, StepStatus.PENDING]
        assert executor.result.kind == ResultKind.INCOMPLETE

        state = await executor.retry()
        assert log == ["s0", "s1", "s1", "s2"]
        assert state.phase == RunPhase.ALL_COMPLETED
        assert executor.result == ExecutionResult.success("0xhash-s2")

    @pytest.mark.asyncio
    async def test_retry_ignored_unless_awaiting(self, fake_signer):
        log: list[str] = []
        executor = StepExecutor([recording_step(log, "s0")], fake_signer)
        await executor.retry()
        assert log == []
        assert executor.state.phase == RunPhase.IDLE

    @pytest.mark.asyncio
    async def test_start_only_once(self, fake_signer):
        log: list[str] = []
        executor = StepExecutor([recording_step(log, "s0")], fake_signer)
        await executor.start()
        await executor.start()
        assert log == ["s0"]

    @pytest.mark.asyncio
    async def test_empty_result_completes_without_confirmation(self, fake_signer):
        log: list[str] = []
        executor = StepExecutor([recording_step(log, "s0", result=None)], fake_signer)
        state = await executor.start()
        assert state.statuses == [StepStatus.COMPLETED]
        assert fake_signer.confirmed == []
        assert executor.result == ExecutionResult.success(None)

    @pytest.mark.asyncio
    async def test_safe_wallet_sentinel_not_confirmed(self, fake_signer):
        async def queued():
            return SAFE_WALLET_TX

        executor = StepExecutor([Step("s0", 11155111, queued)], fake_signer, batched=False)
        await executor.start()
        assert fake_signer.confirmed == []
        assert executor.result.as_outcome() == SAFE_WALLET_TX

    @pytest.mark.asyncio
    async def test_no_steps_is_success(self, fake_signer):
        executor = StepExecutor([], fake_signer)
        await executor.start()
        assert executor.result.kind == ResultKind.SUCCESS

    @pytest.mark.asyncio
    async def test_close_before_completion_is_incomplete(self, fake_signer):
        results = []
        executor = StepExecutor([], fake_signer, on_close=results.append)
        assert executor.close().as_outcome() == INCOMPLETE
        executor.close()
        assert results == [ExecutionResult.incomplete()]

    @pytest.mark.asyncio
    async def test_close_during_run_stops_next_step(self, fake_signer):
        log: list[str] = []
        executor = None

        async def closing():
            log.append("s0")
            executor.close()
            return "0xhash-s0"

        executor = StepExecutor(
            [Step("s0", 11155111, closing), recording_step(log, "s1")], fake_signer
        )
        await executor.start()
        assert log == ["s0"]
        assert executor.state.statuses[1] == StepStatus.PENDING

    @pytest.mark.asyncio
    async def test_next_step_waits_for_previous(self, fake_signer):
        seen: list[list[StepStatus]] = []
        executor = None

        async def observe():
            seen.append(list(executor.state.statuses))
            return "0xhash"

        executor = StepExecutor([Step(f"s{i}", 1, observe) for i in range(3)], fake_signer)
        await executor.start()
        for index, statuses in enumerate(seen):
            assert all(s == StepStatus.COMPLETED for s in statuses[:index])
            assert statuses[index] == StepStatus.PENDING

    @pytest.mark.asyncio
    async def test_on_change_notified(self, fake_signer):
        phases: list[RunPhase] = []
        executor = StepExecutor(
            [recording_step([], "s0")],
            fake_signer,
            on_change=lambda state: phases.append(state.phase),
        )
        await executor.start()
        assert phases[-1] == RunPhase.ALL_COMPLETED
        assert len(phases) >= 2
