"""
Tests for the live board session.

A session is driven exactly as the websocket route drives it: frames in
through handle(), frames out through the send callback.
"""
import asyncio
from datetime import date

from escola.services.board_session import DELETE_TASK_CONFIRMATION, BoardSession
from escola.services.tasks import SELECTED_DELETED, TASK_MOVED
from factories import COORDENADOR, PROFESSOR

DAY = date(2024, 1, 3)


def run(coro):
    return asyncio.run(coro)


async def open_session(store, user, settle):
    frames = []

    async def send(frame):
        frames.append(frame)

    session = BoardSession(store, user, send, clock=lambda: DAY)
    await session.start()
    await settle()
    return session, frames


def boards(frames):
    return [frame["board"] for frame in frames if frame["type"] == "board"]


def notices(frames):
    return [frame for frame in frames if frame["type"] == "notice"]


def column(board, column_id):
    return next(c for c in board["columns"] if c["id"] == column_id)


def card_ids(board, column_id):
    return [card["id"] for card in column(board, column_id)["cards"]]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Snapshots
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestSnapshots:

    def test_first_snapshot_renders_the_board(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, PROFESSOR, settle)
            await session.close()
            return frames

        frames = run(scenario())
        board = boards(frames)[-1]
        assert card_ids(board, "todo") == ["t1"]
        assert card_ids(board, "inprogress") == ["t2"]
        assert card_ids(board, "done") == ["t3", "t4"]
        assert column(board, "todo")["title"] == "A Fazer"

    def test_move_is_acknowledged_then_board_follows(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, PROFESSOR, settle)
            frames.clear()
            await session.handle({
                "type": "move",
                "taskId": "t1",
                "source": {"columnId": "todo", "index": 0},
                "destination": {"columnId": "inprogress", "index": 1},
            })
            await settle()
            await session.close()
            return frames

        frames = run(scenario())
        assert notices(frames) == [{"type": "notice", "level": "success", "message": TASK_MOVED}]
        board = boards(frames)[-1]
        assert card_ids(board, "todo") == []
        assert card_ids(board, "inprogress") == ["t1", "t2"]

    def test_no_op_drop_sends_nothing(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, PROFESSOR, settle)
            frames.clear()
            await session.handle({
                "type": "move",
                "taskId": "t1",
                "source": {"columnId": "todo", "index": 0},
                "destination": None,
            })
            await settle()
            await session.close()
            return frames

        assert run(scenario()) == []
        assert tasks_store.writes == []

    def test_move_of_foreign_task_is_refused(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, PROFESSOR, settle)
            frames.clear()
            await session.handle({
                "type": "move",
                "taskId": "t2",
                "source": {"columnId": "inprogress", "index": 0},
                "destination": {"columnId": "done", "index": 0},
            })
            await session.close()
            return frames

        frames = run(scenario())
        assert [n["level"] for n in notices(frames)] == ["error"]
        assert tasks_store.writes == []

    def test_malformed_frame_is_reported(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, PROFESSOR, settle)
            frames.clear()
            await session.handle({"type": "move", "taskId": "t1"})
            await session.handle({"type": "shout"})
            await session.handle({"type": "ping"})
            await session.close()
            return frames

        frames = run(scenario())
        assert frames[0] == {"type": "notice", "level": "error", "message": "Mensagem inválida."}
        assert frames[1]["level"] == "error"
        assert frames[2] == {"type": "pong"}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Selection and bulk delete
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestSelection:

    def test_select_all_marks_every_done_card(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, COORDENADOR, settle)
            await session.handle({"type": "select_all"})
            await session.close()
            return boards(frames)[-1]

        done = column(run(scenario()), "done")
        assert done["selectAll"] == {"visible": True, "checked": True}
        assert done["bulkDelete"]["visible"] is True
        assert done["bulkDelete"]["count"] == 2
        assert all(card["selected"] for card in done["cards"])

    def test_toggle_outside_done_column_is_refused(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, COORDENADOR, settle)
            frames.clear()
            await session.handle({"type": "toggle_select", "taskId": "t1"})
            await session.close()
            return frames, session.selection.ids

        frames, selected = run(scenario())
        assert [n["level"] for n in notices(frames)] == ["error"]
        assert selected == []

    def test_non_manager_cannot_select(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, PROFESSOR, settle)
            frames.clear()
            await session.handle({"type": "toggle_select", "taskId": "t3"})
            await session.handle({"type": "select_all"})
            await session.close()
            return frames, session.selection.ids

        frames, selected = run(scenario())
        assert [n["level"] for n in notices(frames)] == ["error", "error"]
        assert selected == []

    def test_bulk_delete_asks_for_confirmation_first(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, COORDENADOR, settle)
            await session.handle({"type": "toggle_select", "taskId": "t3"})
            await session.handle({"type": "toggle_select", "taskId": "t4"})
            frames.clear()
            await session.handle({"type": "delete_selected"})
            await session.close()
            return frames

        frames = run(scenario())
        assert len(frames) == 1
        assert frames[0]["type"] == "confirm"
        assert frames[0]["action"] == "delete_selected"
        assert "2 tarefas" in frames[0]["message"]
        assert len(tasks_store.snapshot()) == 4

    def test_confirmed_bulk_delete(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, COORDENADOR, settle)
            await session.handle({"type": "select_all"})
            frames.clear()
            await session.handle({"type": "delete_selected", "confirm": True})
            await settle()
            await session.close()
            return frames, session.selection.ids

        frames, selected = run(scenario())
        assert notices(frames) == [{"type": "notice", "level": "success", "message": SELECTED_DELETED}]
        assert card_ids(boards(frames)[-1], "done") == []
        assert selected == []

    def test_failed_bulk_delete_reports_once_and_keeps_everything(self, tasks_store, settle):
        tasks_store.fail_ids.add("t4")

        async def scenario():
            session, frames = await open_session(tasks_store, COORDENADOR, settle)
            await session.handle({"type": "select_all"})
            frames.clear()
            await session.handle({"type": "delete_selected", "confirm": True})
            await settle()
            await session.close()
            return frames, session.selection.ids

        frames, selected = run(scenario())
        assert notices(frames) == [{"type": "notice", "level": "error", "message": "Erro ao apagar as tarefas."}]
        assert selected == ["t3", "t4"]
        assert {doc["id"] for doc in tasks_store.snapshot()} == {"t1", "t2", "t3", "t4"}

    def test_task_moved_out_of_done_leaves_the_selection(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, COORDENADOR, settle)
            await session.handle({"type": "toggle_select", "taskId": "t3"})
            await tasks_store.update("t3", {"status": "todo"})
            await settle()
            selected_after_move = session.selection.ids
            board = boards(frames)[-1]
            frames.clear()
            await session.handle({"type": "delete_selected", "confirm": True})
            await session.close()
            return selected_after_move, board, frames

        selected_after_move, board, frames = run(scenario())
        assert selected_after_move == []
        assert column(board, "done")["bulkDelete"]["count"] == 0
        assert column(board, "todo")["cards"][-1]["selected"] is False
        assert notices(frames) == [{"type": "notice", "level": "error", "message": "Nenhuma tarefa selecionada."}]
        assert {doc["id"] for doc in tasks_store.snapshot()} == {"t1", "t2", "t3", "t4"}

    def test_single_delete_needs_confirmation(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, COORDENADOR, settle)
            frames.clear()
            await session.handle({"type": "delete_task", "taskId": "t2"})
            await session.close()
            return frames

        frames = run(scenario())
        assert frames == [{
            "type": "confirm",
            "action": "delete_task",
            "message": DELETE_TASK_CONFIRMATION,
            "taskId": "t2",
        }]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Subscription lifecycle
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestLifecycle:

    def test_listener_failure_shows_error_board(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, PROFESSOR, settle)
            tasks_store.fail_subscriptions()
            await settle()
            tasks_kept = len(session.reconciler.state.tasks)
            await session.close()
            return boards(frames)[-1], tasks_kept

        board, tasks_kept = run(scenario())
        assert board == {"authenticated": True, "error": "Erro de conexão com a base de dados", "retryable": True}
        assert tasks_kept == 4

    def test_reload_recovers_from_failure(self, tasks_store, settle):
        async def scenario():
            session, frames = await open_session(tasks_store, PROFESSOR, settle)
            tasks_store.fail_subscriptions()
            await settle()
            await session.handle({"type": "reload"})
            await settle()
            open_count = tasks_store.subscription_count
            await session.close()
            return boards(frames)[-1], open_count

        board, open_count = run(scenario())
        assert "error" not in board
        assert card_ids(board, "done") == ["t3", "t4"]
        assert open_count == 1

    def test_close_releases_listener(self, tasks_store, settle):
        async def scenario():
            session, _ = await open_session(tasks_store, PROFESSOR, settle)
            assert tasks_store.subscription_count == 1
            await session.close()
            await session.close()
            return tasks_store.subscription_count

        assert run(scenario()) == 0

    def test_close_releases_listener_after_send_failed(self, tasks_store, settle):
        async def scenario():
            async def broken_send(frame):
                raise RuntimeError("Cannot call send once a close message has been sent")

            session = BoardSession(tasks_store, PROFESSOR, broken_send, clock=lambda: DAY)
            await session.start()
            await settle()
            await session.close()
            return tasks_store.subscription_count

        assert run(scenario()) == 0

    def test_close_releases_listener_when_error_board_cannot_be_sent(self, tasks_store, settle):
        async def scenario():
            sent = []

            async def send(frame):
                if sent:
                    raise RuntimeError("socket gone")
                sent.append(frame)

            session = BoardSession(tasks_store, PROFESSOR, send, clock=lambda: DAY)
            await session.start()
            await settle()
            tasks_store.fail_subscriptions()
            await settle()
            await session.close()
            return len(sent), tasks_store.subscription_count

        assert run(scenario()) == (1, 0)
