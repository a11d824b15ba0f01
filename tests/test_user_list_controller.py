"""Tests for the paginated user list controller."""

import asyncio

from arrogance_admin.services.users import (
    ListCommand,
    ListPhase,
    ListViewState,
    UserListController,
)
from tests.conftest import InMemoryUserListSource, make_users


def _ids(state: ListViewState) -> list[str]:
    return [user.id for user in state.users]


def test_mount_loads_first_page(list_source: InMemoryUserListSource) -> None:
    async def scenario() -> UserListController:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        assert controller.state.loading
        await controller.wait_idle()
        return controller

    controller = asyncio.run(scenario())

    assert controller.state.phase is ListPhase.READY
    assert _ids(controller.state) == ["A", "B", "C"]
    assert controller.state.has_next_page
    assert list_source.calls == [(3, None)]


def test_pages_forward_and_back_to_first_page(
    list_source: InMemoryUserListSource,
) -> None:
    async def scenario() -> list[tuple[int, list[str], bool]]:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        seen = []
        for command in [
            ListCommand.NEXT_PAGE,
            ListCommand.NEXT_PAGE,
            ListCommand.PREV_PAGE,
            ListCommand.PREV_PAGE,
        ]:
            controller.dispatch(command)
            await controller.wait_idle()
            state = controller.state
            seen.append((state.current_page, _ids(state), state.has_next_page))
        assert controller.state.cursor == 0
        return seen

    seen = asyncio.run(scenario())

    assert seen == [
        (1, ["D", "E", "F"], True),
        (2, ["G"], False),
        (1, ["D", "E", "F"], True),
        (0, ["A", "B", "C"], True),
    ]
    assert [token for _, token in list_source.calls] == [None, "C", "F", "C", None]


def test_next_page_on_last_page_is_ignored(
    list_source: InMemoryUserListSource,
) -> None:
    async def scenario() -> UserListController:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        for _ in range(3):
            controller.dispatch(ListCommand.NEXT_PAGE)
            await controller.wait_idle()
        return controller

    controller = asyncio.run(scenario())

    assert controller.state.current_page == 2
    assert _ids(controller.state) == ["G"]
    assert len(list_source.calls) == 3


def test_prev_page_on_first_page_is_ignored(
    list_source: InMemoryUserListSource,
) -> None:
    async def scenario() -> UserListController:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        controller.dispatch(ListCommand.PREV_PAGE)
        await controller.wait_idle()
        return controller

    controller = asyncio.run(scenario())

    assert controller.state.current_page == 0
    assert len(list_source.calls) == 1


def test_cursor_stays_within_bounds(list_source: InMemoryUserListSource) -> None:
    moves = [ListCommand.MOVE_UP] * 2 + [ListCommand.MOVE_DOWN] * 5
    moves += [ListCommand.MOVE_UP, ListCommand.MOVE_DOWN, ListCommand.MOVE_UP] * 2

    async def scenario() -> list[int]:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        cursors = []
        for move in moves:
            controller.dispatch(move)
            cursors.append(controller.state.cursor)
        return cursors

    cursors = asyncio.run(scenario())

    assert all(0 <= cursor <= 2 for cursor in cursors)
    assert cursors[:7] == [0, 0, 1, 2, 2, 2, 2]


def test_select_returns_user_under_cursor(
    list_source: InMemoryUserListSource,
) -> None:
    async def scenario() -> tuple[str | None, int]:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        controller.dispatch(ListCommand.MOVE_DOWN)
        selected = controller.dispatch(ListCommand.SELECT)
        return (selected.id if selected else None, controller.state.cursor)

    assert asyncio.run(scenario()) == ("B", 1)


def test_select_on_empty_list_returns_none() -> None:
    async def scenario() -> object:
        controller = UserListController(source=InMemoryUserListSource(), page_size=3)
        controller.mount()
        await controller.wait_idle()
        controller.dispatch(ListCommand.MOVE_DOWN)
        assert controller.state.cursor == 0
        return controller.dispatch(ListCommand.SELECT)

    assert asyncio.run(scenario()) is None


def test_commands_while_loading_are_ignored(
    list_source: InMemoryUserListSource,
) -> None:
    async def scenario() -> UserListController:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        controller.dispatch(ListCommand.MOVE_DOWN)
        controller.dispatch(ListCommand.NEXT_PAGE)
        assert controller.state.loading
        for command in ListCommand:
            assert controller.dispatch(command) is None
        assert controller.state.current_page == 1
        assert controller.state.cursor == 0
        await controller.wait_idle()
        return controller

    controller = asyncio.run(scenario())

    assert len(list_source.calls) == 2
    assert controller.state.current_page == 1
    assert _ids(controller.state) == ["D", "E", "F"]


def test_fetch_failure_keeps_previous_rows(
    list_source: InMemoryUserListSource,
) -> None:
    async def scenario() -> UserListController:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        list_source.failures.append(RuntimeError("network down"))
        controller.dispatch(ListCommand.NEXT_PAGE)
        await controller.wait_idle()
        return controller

    controller = asyncio.run(scenario())

    state = controller.state
    assert state.phase is ListPhase.ERROR
    assert state.error is not None
    assert "network down" in state.error
    assert _ids(state) == ["A", "B", "C"]
    assert state.current_page == 0


def test_retry_after_failure_reaches_next_page(
    list_source: InMemoryUserListSource,
) -> None:
    async def scenario() -> UserListController:
        controller = UserListController(source=list_source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        list_source.failures.append(RuntimeError("timeout"))
        controller.dispatch(ListCommand.NEXT_PAGE)
        await controller.wait_idle()
        controller.dispatch(ListCommand.NEXT_PAGE)
        await controller.wait_idle()
        return controller

    controller = asyncio.run(scenario())

    assert controller.state.phase is ListPhase.READY
    assert controller.state.error is None
    assert controller.state.current_page == 1
    assert _ids(controller.state) == ["D", "E", "F"]


def test_reload_after_initial_failure() -> None:
    source = InMemoryUserListSource(
        users=make_users("A", "B"), failures=[RuntimeError("boom")]
    )

    async def scenario() -> UserListController:
        controller = UserListController(source=source, page_size=3)
        controller.mount()
        await controller.wait_idle()
        assert controller.state.phase is ListPhase.ERROR
        assert controller.state.users == []
        controller.dispatch(ListCommand.NEXT_PAGE)
        assert not controller.state.loading
        controller.dispatch(ListCommand.RELOAD)
        await controller.wait_idle()
        return controller

    controller = asyncio.run(scenario())

    assert _ids(controller.state) == ["A", "B"]
    assert not controller.state.has_next_page


def test_unmount_discards_late_result(list_source: InMemoryUserListSource) -> None:
    async def scenario() -> UserListController:
        list_source.gate = asyncio.Event()
        controller = UserListController(source=list_source, page_size=3)
        notified: list[ListViewState] = []
        controller.listeners.append(notified.append)
        controller.mount()
        controller.unmount()
        list_source.gate.set()
        await controller.wait_idle()
        assert len(notified) == 1
        return controller

    controller = asyncio.run(scenario())

    assert controller.state.users == []
    assert controller.state.loading
