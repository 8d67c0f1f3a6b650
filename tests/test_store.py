from stampdesk.core.stamps import StampStore


def test_place_appends_and_returns_stamp(red_kind):
    store = StampStore()
    stamp = store.place(red_kind, (10, 20), 60, 1)

    assert stamp.position == (10, 20)
    assert stamp.size == 60
    assert stamp.kind is red_kind
    assert store.all() == [stamp]


def test_list_keeps_insertion_order(red_kind, blue_kind):
    store = StampStore()
    first = store.place(red_kind, (10, 10), 60, 1)
    store.place(blue_kind, (5, 5), 60, 2)
    second = store.place(blue_kind, (10, 10), 60, 1)

    assert store.list(1) == [first, second]


def test_remove_all_for_page_isolates_other_pages(red_kind):
    store = StampStore()
    for page in (1, 2, 3):
        store.place(red_kind, (10, 10), 60, page)

    removed = store.remove_all_for_page(2)

    assert removed == 1
    assert len(store.list(1)) == 1
    assert len(store.list(2)) == 0
    assert len(store.list(3)) == 1


def test_snapshot_is_independent_of_later_changes(red_kind):
    store = StampStore()
    store.place(red_kind, (10, 10), 60, 1)
    snapshot = store.snapshot()

    store.place(red_kind, (20, 20), 60, 1)
    store.remove_all_for_page(1)

    assert len(snapshot) == 1
    assert snapshot[0].position == (10, 10)


def test_replace_substitutes_whole_set(red_kind, blue_kind):
    store = StampStore()
    store.place(red_kind, (10, 10), 60, 1)
    other = StampStore()
    other.place(blue_kind, (1, 1), 50, 3)

    store.replace(other.snapshot())

    assert store.pages() == [3]
    assert store.list(1) == []
    assert store.list(3)[0].kind.id == "blue"


def test_empty_store():
    store = StampStore()
    assert store.is_empty()
    assert store.count() == 0
    assert store.pages() == []
