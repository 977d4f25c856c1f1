import asyncio
import json

from admin_console.services.sse_connection_manager import SSEConnectionManager


def test_notice_from_worker_thread_reaches_user_queue():
    manager = SSEConnectionManager()

    async def scenario():
        target = await manager.register_client(1)
        other = await manager.register_client(2)
        delivered = await asyncio.to_thread(manager.notice_user_to_update_menus_by_user_ids, [1])
        message = await asyncio.wait_for(target.get(), timeout=1.0)
        return delivered, message, other.empty()

    delivered, message, other_empty = asyncio.run(scenario())
    assert delivered == 1
    assert message.startswith("event: updateMenu\n")
    assert json.loads(message.split("data: ", 1)[1]) == {}
    assert other_empty


def test_unregister_client_stops_delivery():
    manager = SSEConnectionManager()

    async def scenario():
        queue = await manager.register_client(5)
        manager.unregister_client(5, queue)
        return manager.notice_user_to_update_menus_by_user_ids([5]), queue.empty()

    delivered, empty = asyncio.run(scenario())
    assert delivered == 0
    assert empty
    assert manager.online_user_ids() == []


def test_send_without_event_loop_is_noop():
    manager = SSEConnectionManager()
    assert manager.send_to_users([1], "updateMenu") == 0
