import pytest

from stampdesk.config import StamperSettings
from stampdesk.core.stamps import StampManager
from stampdesk.errors import NoStampSelectedError


@pytest.fixture
def manager(settings, red_kind):
    return StampManager(settings, red_kind)


def test_select_kind_resets_size_to_default(manager, blue_kind):
    manager.set_size(200)
    manager.select_kind(blue_kind)
    assert manager.current_size == blue_kind.default_size


def test_size_is_clamped(manager):
    assert manager.set_size(10) == 50
    assert manager.set_size(1000) == 300
    manager.set_size(295)
    assert manager.increase_size() == 300
    manager.set_size(55)
    assert manager.decrease_size() == 50


def test_size_steps(manager):
    manager.set_size(100)
    assert manager.increase_size() == 110
    assert manager.decrease_size() == 100


def test_placed_stamp_keeps_size_at_placement(manager):
    manager.set_size(100)
    stamp = manager.place_at(10, 20, 1)
    manager.set_size(200)

    assert stamp.size == 100
    assert manager.stamps_for_page(1)[0].size == 100


def test_place_without_selection_records_nothing(settings):
    manager = StampManager(settings)
    with pytest.raises(NoStampSelectedError):
        manager.place_at(1, 1, 1)
    assert not manager.can_undo()
    assert manager.get_stamp_count() == 0


def test_undo_redo_through_manager(manager, blue_kind):
    a = manager.place_at(10, 10, 1)
    manager.select_kind(blue_kind)
    b = manager.place_at(20, 20, 1)

    assert manager.undo()
    assert manager.all_stamps() == [a]
    assert manager.undo()
    assert manager.all_stamps() == []
    assert not manager.undo()

    assert manager.redo()
    assert manager.redo()
    assert manager.all_stamps() == [a, b]
    assert not manager.redo()


def test_new_placement_after_undo_disables_redo(manager):
    manager.place_at(10, 10, 1)
    manager.place_at(20, 20, 1)
    manager.undo()
    assert manager.can_redo()

    manager.place_at(30, 30, 1)

    assert not manager.can_redo()


def test_clear_page_is_undoable(manager):
    for page in (1, 2, 3):
        manager.place_at(10, 10, page)

    assert manager.clear_page(2) == 1
    assert [len(manager.stamps_for_page(p)) for p in (1, 2, 3)] == [1, 0, 1]

    manager.undo()
    assert len(manager.stamps_for_page(2)) == 1


def test_preview_is_never_stored(manager):
    preview = manager.preview_at(50, 60, 1)

    assert preview.position == (50, 60)
    assert preview.size == manager.current_size
    assert manager.get_stamp_count() == 0
    assert not manager.can_undo()


def test_preview_without_selection(settings):
    assert StampManager(settings).preview_at(1, 1, 1) is None


def test_listeners_are_notified_and_can_unsubscribe(manager):
    calls = []
    unsubscribe = manager.subscribe(lambda: calls.append(manager.get_stamp_count()))

    manager.place_at(1, 1, 1)
    manager.undo()
    unsubscribe()
    manager.redo()

    assert calls == [1, 0]


def test_history_limit_comes_from_settings(red_kind):
    manager = StampManager(StamperSettings(history_limit=3), red_kind)
    for i in range(5):
        manager.place_at(i, i, 1)

    undone = 0
    while manager.undo():
        undone += 1

    assert undone == 3
    assert manager.get_stamp_count() == 2


def test_reset_drops_stamps_and_history(manager):
    manager.place_at(1, 1, 1)
    manager.reset()
    assert manager.get_stamp_count() == 0
    assert not manager.can_undo()
