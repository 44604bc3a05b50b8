import pytest

from classroom_app.core.exceptions import NotFoundError, ValidationError


async def test_store_and_fetch(storage):
    reference = await storage.store(b"%PDF-1.4 essay", "essay.pdf")

    assert reference.endswith(".pdf")
    assert await storage.fetch(reference) == b"%PDF-1.4 essay"


async def test_references_are_unique(storage):
    first = await storage.store(b"a", "notes.txt")
    second = await storage.store(b"b", "notes.txt")

    assert first != second
    assert await storage.fetch(first) == b"a"


async def test_fetch_missing_file(storage):
    with pytest.raises(NotFoundError):
        await storage.fetch("missing.txt")


async def test_references_cannot_escape_root(storage):
    with pytest.raises(ValidationError):
        await storage.fetch("../outside.txt")
