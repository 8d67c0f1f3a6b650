import json

import fitz
import pytest

from stampdesk.core.stamps import ImageFormat, StampCatalog
from stampdesk.errors import CatalogError
from tests.helpers import BLUE, RED, make_kind, make_png_bytes


def _write_manifest(directory, entries):
    (directory / "stamps.json").write_text(json.dumps(entries), encoding="utf-8")


def test_from_manifest_loads_preloaded_stamps(tmp_path):
    (tmp_path / "red.png").write_bytes(make_png_bytes(RED))
    (tmp_path / "blue.png").write_bytes(make_png_bytes(BLUE))
    _write_manifest(tmp_path, [
        {"id": "red", "filename": "red.png", "label": "Red"},
        {"id": "blue", "filename": "blue.png", "label": "Blue", "size": 90},
    ])

    catalog = StampCatalog.from_manifest(str(tmp_path))

    assert [k.id for k in catalog] == ["red", "blue"]
    assert catalog.get("red").default_size == 150
    assert catalog.get("blue").default_size == 90
    assert catalog.get("red").is_builtin
    assert catalog.get("red").image_format is ImageFormat.PNG
    assert catalog.default_kind().id == "red"


def test_unreadable_stamp_is_skipped(tmp_path):
    (tmp_path / "red.png").write_bytes(make_png_bytes(RED))
    _write_manifest(tmp_path, [
        {"id": "missing", "filename": "missing.png", "label": "Missing"},
        {"id": "red", "filename": "red.png", "label": "Red"},
    ])

    catalog = StampCatalog.from_manifest(str(tmp_path))

    assert [k.id for k in catalog] == ["red"]


def test_missing_manifest_raises(tmp_path):
    with pytest.raises(CatalogError):
        StampCatalog.from_manifest(str(tmp_path))


def test_malformed_manifest_raises(tmp_path):
    (tmp_path / "stamps.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        StampCatalog.from_manifest(str(tmp_path))


def test_bundled_manifest_loads():
    catalog = StampCatalog.from_manifest()
    assert all(kind.is_builtin for kind in catalog)

    seal = catalog.get("sample-seal")
    assert seal is not None
    assert catalog.default_kind() == seal
    assert seal.image_format is ImageFormat.PNG
    assert seal.default_size == 150
    assert fitz.Pixmap(seal.image_bytes).width == 128


def test_with_custom_image_returns_new_catalog():
    catalog = StampCatalog([make_kind("red", RED)])

    extended = catalog.with_custom_image("logo.png", make_png_bytes(BLUE))

    assert len(catalog) == 1
    assert len(extended) == 2
    custom = extended.kinds[-1]
    assert custom.id == "custom-1"
    assert not custom.is_builtin
    assert custom.default_size == 150

    again = extended.with_custom_image("other.jpg", b"\xff\xd8data", ImageFormat.JPEG, 80)
    assert again.kinds[-1].id == "custom-2"
    assert again.kinds[-1].image_format is ImageFormat.JPEG


def test_empty_custom_image_is_rejected():
    with pytest.raises(CatalogError):
        StampCatalog().with_custom_image("empty.png", b"")


def test_duplicate_ids_are_rejected():
    with pytest.raises(CatalogError):
        StampCatalog([make_kind("red"), make_kind("red")])


@pytest.mark.parametrize("declared, expected", [
    ("image/png", ImageFormat.PNG),
    ("image/jpeg", ImageFormat.JPEG),
    ("photo.JPG", ImageFormat.JPEG),
    ("data:image/jpg;base64,", ImageFormat.JPEG),
    ("stamp.gif", ImageFormat.PNG),
    (None, ImageFormat.PNG),
])
def test_image_format_from_declared(declared, expected):
    assert ImageFormat.from_declared(declared) is expected
