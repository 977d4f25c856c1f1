from types import SimpleNamespace

from admin_console.modules.system.services.role_service import diff_association


def _rows(*pairs):
    return [SimpleNamespace(id=row_id, menu_id=menu_id) for row_id, menu_id in pairs]


def _menu_id(row):
    return row.menu_id


def test_diff_inserts_and_deletes():
    inserts, deletes = diff_association(_rows((1, 10), (2, 20), (3, 30)), [20, 30, 40], _menu_id)
    assert inserts == [40]
    assert deletes == [1]


def test_diff_from_empty():
    inserts, deletes = diff_association([], [5, 6], _menu_id)
    assert inserts == [5, 6]
    assert deletes == []


def test_diff_to_empty():
    inserts, deletes = diff_association(_rows((1, 10), (2, 20)), [], _menu_id)
    assert inserts == []
    assert deletes == [1, 2]


def test_diff_unchanged():
    assert diff_association(_rows((1, 10), (2, 20)), [20, 10], _menu_id) == ([], [])


def test_diff_removes_duplicate_rows_and_ignores_duplicate_targets():
    inserts, deletes = diff_association(_rows((1, 10), (2, 10), (3, 20)), [10, 10, 30], _menu_id)
    assert inserts == [30]
    assert deletes == [2, 3]
