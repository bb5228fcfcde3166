import asyncio

from courseclient.errors import RequestFailed, StorageError
from courseclient.scheduler import SaveScheduler, SaveState

from .fakes import run

DEBOUNCE = 0.05
SETTLE = 0.3


class RecordingSave:
    """Async save callable that records calls and can be held or made to fail."""

    def __init__(self, gate=None, error=None):
        self.calls = []
        self.gate = gate
        self.error = error
        self.active = 0
        self.max_active = 0

    async def __call__(self, task_id, content):
        self.calls.append((task_id, content))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.error is not None:
                raise self.error
        finally:
            self.active -= 1


def make(save, **kw):
    states = []
    kw.setdefault("debounce", DEBOUNCE)
    kw.setdefault("display_period", DEBOUNCE)
    s = SaveScheduler(save, on_state=states.append, **kw)
    return s, states


def test_burst_of_edits_results_in_one_save_with_last_content():
    async def scenario():
        save = RecordingSave()
        s, _ = make(save)
        for i in range(5):
            s.edit(1, f"draft {i}")
            await asyncio.sleep(DEBOUNCE / 5)
        assert save.calls == []
        await asyncio.sleep(SETTLE)
        return save

    save = run(scenario())
    assert save.calls == [(1, "draft 4")]


def test_states_run_pending_saving_saved_then_idle():
    async def scenario():
        s, states = make(RecordingSave())
        s.edit(1, "x")
        await asyncio.sleep(SETTLE)
        return s, states

    s, states = run(scenario())
    assert states == [SaveState.PENDING, SaveState.SAVING, SaveState.SAVED, SaveState.IDLE]
    assert s.state is SaveState.IDLE


def test_manual_save_right_after_edit_cancels_debounced_save():
    async def scenario():
        save = RecordingSave()
        s, _ = make(save)
        s.edit(1, "typed")
        ok = await s.save_now(1, "typed")
        await asyncio.sleep(SETTLE)
        return save, ok

    save, ok = run(scenario())
    assert ok is True
    assert save.calls == [(1, "typed")]


def test_save_now_without_arguments_saves_buffered_edit():
    async def scenario():
        save = RecordingSave()
        s, _ = make(save, debounce=10)
        assert await s.save_now() is None
        s.edit(3, "buffered")
        ok = await s.save_now()
        return save, ok

    save, ok = run(scenario())
    assert ok is True
    assert save.calls == [(3, "buffered")]


def test_only_one_save_in_flight_and_manual_save_waits_for_it():
    async def scenario():
        gate = asyncio.Event()
        save = RecordingSave(gate=gate)
        s, _ = make(save)
        s.edit(1, "a")
        await asyncio.sleep(DEBOUNCE * 3)
        assert s.state is SaveState.SAVING
        assert save.calls == [(1, "a")]

        s.edit(1, "b")
        manual = asyncio.ensure_future(s.save_now(1, "c"))
        await asyncio.sleep(DEBOUNCE * 3)
        assert save.calls == [(1, "a")]

        gate.set()
        ok = await manual
        await asyncio.sleep(SETTLE)
        return save, ok

    save, ok = run(scenario())
    assert ok is True
    assert save.max_active == 1
    assert save.calls == [(1, "a"), (1, "c")]


def test_edit_during_save_is_saved_after_it_resolves():
    async def scenario():
        gate = asyncio.Event()
        save = RecordingSave(gate=gate)
        s, _ = make(save)
        s.edit(1, "first")
        await asyncio.sleep(DEBOUNCE * 3)
        s.edit(1, "second")
        assert s.state is SaveState.SAVING
        assert s.has_unsaved
        gate.set()
        await asyncio.sleep(SETTLE)
        return s, save

    s, save = run(scenario())
    assert save.calls == [(1, "first"), (1, "second")]
    assert save.max_active == 1
    assert not s.has_unsaved


def test_failed_save_ends_in_error_without_retry():
    async def scenario():
        save = RecordingSave(error=StorageError("Database error.", 500))
        s, states = make(save, display_period=SETTLE * 2)
        s.edit(2, "x")
        await asyncio.sleep(SETTLE)
        return s, save, states

    s, save, states = run(scenario())
    assert save.calls == [(2, "x")]
    assert s.state is SaveState.ERROR
    assert isinstance(s.last_error, StorageError)
    assert states[-1] is SaveState.ERROR


def test_error_decays_to_idle_and_next_edit_tries_again():
    async def scenario():
        save = RecordingSave(error=RequestFailed("timed out"))
        s, states = make(save)
        s.edit(2, "x")
        await asyncio.sleep(SETTLE)
        assert s.state is SaveState.IDLE
        save.error = None
        s.edit(2, "xy")
        await asyncio.sleep(SETTLE)
        return s, save, states

    s, save, states = run(scenario())
    assert save.calls == [(2, "x"), (2, "xy")]
    assert SaveState.ERROR in states
    assert s.last_error is None


def test_manual_save_reports_failure():
    async def scenario():
        s, _ = make(RecordingSave(error=StorageError("boom", 500)))
        return await s.save_now(1, "x"), s.state

    ok, state = run(scenario())
    assert ok is False
    assert state is SaveState.ERROR


def test_flush_pending_keeps_content_of_previous_task():
    async def scenario():
        save = RecordingSave()
        s, _ = make(save, debounce=10)
        s.edit(1, "task one text")
        pending = s.flush_pending()
        s.edit(2, "task two text")
        assert await pending is True
        await s.wait_idle()
        return save

    save = run(scenario())
    assert save.calls == [(1, "task one text"), (2, "task two text")]


def test_flush_pending_with_nothing_buffered():
    async def scenario():
        s, _ = make(RecordingSave())
        return s.flush_pending()

    assert run(scenario()) is None


def test_discard_drops_buffer_but_not_the_save_in_flight():
    async def scenario():
        gate = asyncio.Event()
        save = RecordingSave(gate=gate)
        s, _ = make(save)
        s.edit(1, "sent")
        await asyncio.sleep(DEBOUNCE * 3)
        s.edit(1, "buffered")
        s.discard()
        gate.set()
        await asyncio.sleep(SETTLE)
        return s, save

    s, save = run(scenario())
    assert save.calls == [(1, "sent")]
    assert not s.has_unsaved
    assert s.state is SaveState.IDLE


def test_discard_cancels_pending_debounce():
    async def scenario():
        save = RecordingSave()
        s, states = make(save)
        s.edit(1, "typed")
        s.discard()
        await asyncio.sleep(SETTLE)
        return save, states

    save, states = run(scenario())
    assert save.calls == []
    assert states == [SaveState.PENDING, SaveState.IDLE]
