from __future__ import annotations

import io

import pytest

from catalog.services.object_store import LocalObjectStore, is_local_url, sanitize_filename


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("week 1 notes.pdf", "week_1_notes.pdf"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\me\\final  draft.docx", "final_draft.docx"),
        ("résumé final.pdf", "r_sum_final.pdf"),
        ("   ", "file"),
        ("...", "file"),
    ],
)
def test_sanitize_filename(raw: str, expected: str) -> None:
    assert sanitize_filename(raw) == expected


def test_sanitize_filename_keeps_the_extension_of_long_names() -> None:
    name = sanitize_filename("x" * 500 + ".pdf")
    assert len(name) == 120
    assert name.endswith(".pdf")


def test_is_local_url() -> None:
    assert is_local_url("uploads/123-a.pdf")
    assert not is_local_url("https://example.com/uploads/a.pdf")
    assert not is_local_url("")


def test_root_is_created_on_demand(tmp_path) -> None:
    store = LocalObjectStore(tmp_path / "objects")
    assert store.root == (tmp_path / "objects").resolve()
    assert not store.root.exists()
    store.ensure_root()
    assert store.root.is_dir()


@pytest.mark.asyncio
async def test_save_writes_unique_objects(tmp_path) -> None:
    store = LocalObjectStore(tmp_path)

    first = await store.save(io.BytesIO(b"one"), "same name.txt")
    second = await store.save(io.BytesIO(b"two"), "same name.txt")

    assert first != second
    assert first.startswith("uploads/") and first.endswith("-same_name.txt")
    assert store.path_for(first).read_bytes() == b"one"
    assert store.path_for(second).read_bytes() == b"two"


@pytest.mark.asyncio
async def test_save_never_overwrites(tmp_path, monkeypatch) -> None:
    store = LocalObjectStore(tmp_path)
    monkeypatch.setattr(store, "make_key", lambda filename: "fixed-key.txt")

    await store.save(io.BytesIO(b"original"), "a.txt")
    with pytest.raises(FileExistsError):
        await store.save(io.BytesIO(b"intruder"), "a.txt")

    assert (tmp_path / "fixed-key.txt").read_bytes() == b"original"


@pytest.mark.asyncio
async def test_delete_removes_object(tmp_path) -> None:
    store = LocalObjectStore(tmp_path)
    url = await store.save(io.BytesIO(b"bye"), "bye.txt")

    result = await store.delete(url)
    assert result.ok and result.removed
    assert not store.path_for(url).exists()


@pytest.mark.asyncio
async def test_delete_missing_object_is_not_an_error(tmp_path) -> None:
    store = LocalObjectStore(tmp_path)

    result = await store.delete("uploads/never-stored.txt")
    assert result.ok
    assert not result.removed


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["uploads/../secret.txt", "uploads/", "https://example.com/a.txt"])
async def test_delete_refuses_paths_outside_the_store(tmp_path, url) -> None:
    root = tmp_path / "store"
    store = LocalObjectStore(root)
    store.ensure_root()
    secret = tmp_path / "secret.txt"
    secret.write_text("classified")

    result = await store.delete(url)
    assert not result.ok
    assert not result.removed
    assert secret.read_text() == "classified"


@pytest.mark.asyncio
async def test_delete_reports_filesystem_errors(tmp_path) -> None:
    store = LocalObjectStore(tmp_path)
    # A directory can't be unlinked like a file.
    (tmp_path / "a-directory").mkdir()

    result = await store.delete("uploads/a-directory")
    assert not result.ok
    assert result.error
    assert (tmp_path / "a-directory").is_dir()
