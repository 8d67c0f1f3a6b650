import fitz
import pytest

from stampdesk.controllers import StampController
from stampdesk.core.document import PageRenderer, RenderQueue
from stampdesk.core.export import ExportWorker
from stampdesk.core.stamps import StampManager, StampStore


@pytest.fixture
def renderer(qapp, pdf_bytes):
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    yield PageRenderer(doc, 1.5)
    doc.close()


def test_render_queue_delivers_requested_page(qtbot, renderer):
    queue = RenderQueue(renderer)

    with qtbot.waitSignal(queue.page_rendered, timeout=5000) as blocker:
        queue.request(2)

    page_number, image = blocker.args
    assert page_number == 2
    assert image.width() == 315
    queue.shutdown()


def test_render_queue_coalesces_superseded_requests(qtbot, renderer):
    queue = RenderQueue(renderer)
    delivered = []
    queue.page_rendered.connect(lambda page, image: delivered.append(page))

    queue.request(1)
    queue.request(2)
    queue.request(3)

    qtbot.waitUntil(lambda: delivered == [3], timeout=5000)
    qtbot.waitUntil(lambda: not queue.is_busy, timeout=5000)
    assert delivered == [3]
    queue.shutdown()


def test_render_queue_reports_failed_page(qtbot, renderer):
    queue = RenderQueue(renderer)

    with qtbot.waitSignal(queue.render_failed, timeout=5000) as blocker:
        queue.request(9)

    assert blocker.args[0] == 9
    queue.shutdown()


def test_render_queue_ignores_requests_after_shutdown(qtbot, renderer):
    queue = RenderQueue(renderer)
    queue.shutdown()
    queue.request(1)
    assert not queue.is_busy


def test_export_worker_emits_bytes_and_filename(qtbot, pdf_bytes, red_kind):
    store = StampStore()
    store.place(red_kind, (150, 150), 60, 2)
    worker = ExportWorker(pdf_bytes, "bill.pdf", store.all(), 1.5)

    with qtbot.waitSignal(worker.export_finished, timeout=10000) as blocker:
        worker.start()

    data, filename = blocker.args
    assert data.startswith(b"%PDF")
    assert filename == "stamped_bill.pdf"
    worker.wait()


def test_export_worker_reports_nothing_to_export(qtbot, pdf_bytes):
    worker = ExportWorker(pdf_bytes, "bill.pdf", [], 1.5)

    with qtbot.waitSignal(worker.export_failed, timeout=10000) as blocker:
        worker.start()

    assert "no stamps" in blocker.args[0].lower()
    worker.wait()


def test_cancelled_export_emits_nothing(qtbot, pdf_bytes, red_kind):
    store = StampStore()
    store.place(red_kind, (150, 150), 60, 1)
    worker = ExportWorker(pdf_bytes, "bill.pdf", store.all(), 1.5)
    emitted = []
    worker.export_finished.connect(lambda *args: emitted.append(args))
    worker.export_failed.connect(lambda *args: emitted.append(args))

    worker.cancel()
    worker.start()
    worker.wait()
    qtbot.wait(50)

    assert emitted == []


def test_export_worker_copies_stamps(pdf_bytes, red_kind):
    store = StampStore()
    store.place(red_kind, (150, 150), 60, 1)
    worker = ExportWorker(pdf_bytes, "bill.pdf", store.all(), 1.5)

    store.remove_all_for_page(1)

    assert len(worker.stamps) == 1


def test_controller_emits_on_changes(qtbot, settings, red_kind):
    manager = StampManager(settings, red_kind)
    controller = StampController(manager)
    history = []
    controller.history_changed.connect(lambda u, r: history.append((u, r)))

    with qtbot.waitSignal(controller.stamps_changed, timeout=1000):
        controller.place_stamp(10, 10, 1)
    controller.undo()

    assert history == [(True, False), (False, True)]

    with qtbot.waitSignal(controller.size_changed, timeout=1000) as blocker:
        controller.increase_size()
    assert blocker.args == [70.0]


def test_controller_without_selection_places_nothing(settings):
    controller = StampController(StampManager(settings))
    assert controller.place_stamp(10, 10, 1) is None


def test_detached_controller_stops_emitting(qtbot, settings, red_kind):
    manager = StampManager(settings, red_kind)
    controller = StampController(manager)
    controller.detach()

    with qtbot.assertNotEmitted(controller.stamps_changed):
        manager.place_at(1, 1, 1)
