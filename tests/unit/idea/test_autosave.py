import anyio
import pytest

from ideaflow.idea import Autosaver, IdeaDraftStorage, IdeaWorkflow
from ideaflow.utils import MockStateStore

pytestmark = pytest.mark.anyio


@pytest.mark.parametrize("interval", [0, -1.0])
def test_rejects_non_positive_interval(workflow: IdeaWorkflow, interval: float) -> None:
    with pytest.raises(ValueError, match="must be positive"):
        Autosaver(workflow, interval)


def test_tick_flushes_workflow(
    workflow: IdeaWorkflow, store: MockStateStore, storage: IdeaDraftStorage
) -> None:
    store.clear()
    autosaver = Autosaver(workflow, 5.0)

    assert autosaver.tick() is True

    assert autosaver.saves == 1
    assert storage.data_key in store
    assert storage.step_key in store


def test_stop_without_run_is_noop(workflow: IdeaWorkflow) -> None:
    autosaver = Autosaver(workflow)

    autosaver.stop()

    assert autosaver.interval == 30.0
    assert autosaver.saves == 0


async def test_running_flushes_periodically(workflow: IdeaWorkflow) -> None:
    autosaver = Autosaver(workflow, 0.01)

    async with autosaver.running():
        await anyio.sleep(0.1)

    saves = autosaver.saves
    assert saves >= 2
    await anyio.sleep(0.05)
    assert autosaver.saves == saves


async def test_stop_exits_before_first_flush(workflow: IdeaWorkflow) -> None:
    autosaver = Autosaver(workflow, 10.0)

    with anyio.fail_after(1):
        async with autosaver.running():
            pass

    assert autosaver.saves == 0


async def test_run_can_be_cancelled(workflow: IdeaWorkflow) -> None:
    autosaver = Autosaver(workflow, 0.01)

    async with anyio.create_task_group() as tg:
        await tg.start(autosaver.run)
        await anyio.sleep(0.05)
        tg.cancel_scope.cancel()

    assert autosaver.saves >= 1
