import pytest

from services.document_processor import DocumentProcessor
from services.file_storage import FileStorage, safe_filename, unique_path


@pytest.fixture
def storage(tmp_path):
    return FileStorage(root=tmp_path, public_url="http://files.test/files/")


def test_safe_filename():
    assert safe_filename("Method Statement (rev 2).pdf") == "Method_Statement__rev_2_.pdf"
    assert safe_filename("") == "file"


def test_unique_path_layout():
    first = unique_path("plan.pdf", "bidders/b1")
    second = unique_path("plan.pdf", "bidders/b1")

    assert first.startswith("bidders/b1/")
    assert first.endswith("-plan.pdf")
    assert first != second


def test_save_read_delete(storage, tmp_path):
    stored = storage.save(b"%PDF-1.4 test", "plan.pdf", "tenders/t1")

    assert stored.size == 13
    assert stored.url == f"http://files.test/files/{stored.path}"
    assert (tmp_path / stored.path).exists()
    assert storage.read(stored.path) == b"%PDF-1.4 test"

    assert storage.delete(stored.path) is True
    assert not (tmp_path / stored.path).exists()
    assert storage.delete(stored.path) is False


def test_delete_without_path(storage):
    assert storage.delete(None) is False


def test_paths_cannot_escape_root(storage):
    with pytest.raises(ValueError):
        storage.read("../outside.txt")


def test_text_documents_are_cleaned():
    result = DocumentProcessor().process_bytes(b"Scope   of  works\n\n\n\nEnd", "scope.txt")

    assert result["text"] == "Scope of works\n\nEnd"
    assert result["format"] == "text"
    assert result["truncated"] is False


def test_long_documents_are_truncated():
    result = DocumentProcessor(max_chars=10).process_bytes(b"a" * 50, "notes.md")

    assert result["text"] == "a" * 10
    assert result["truncated"] is True
    assert result["warnings"]


def test_unsupported_format():
    with pytest.raises(ValueError, match=".xlsx"):
        DocumentProcessor().process_bytes(b"data", "prices.xlsx")
