from sqlalchemy.exc import OperationalError

from learning_penguin import repositories

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


def _upload(client, name="notes.pdf", content=PDF_BYTES, content_type="application/pdf"):
    return client.post("/upload", files={"pdfFile": (name, content, content_type)})


def test_upload_then_list_includes_record(client, upload_dir):
    r = _upload(client)
    assert r.status_code == 200
    assert r.text.startswith("File uploaded successfully: ")
    assert r.text.endswith("-notes.pdf")

    listed = client.get("/pdfs")
    assert listed.status_code == 200
    files = listed.json()
    assert len(files) == 1
    rec = files[0]
    assert rec["original_name"] == "notes.pdf"
    assert rec["size"] == len(PDF_BYTES)
    assert rec["media_type"] == "application/pdf"
    assert rec["filename"].endswith("-notes.pdf")
    stored = upload_dir / rec["filename"]
    assert stored.exists()
    assert stored.read_bytes() == PDF_BYTES


def test_extension_check_ignores_case(client):
    r = _upload(client, name="SCAN.PDF")
    assert r.status_code == 200
    assert client.get("/pdfs").json()[0]["original_name"] == "SCAN.PDF"


def test_rejects_non_pdf_extension(client, upload_dir):
    r = _upload(client, name="notes.txt", content=b"plain text", content_type="text/plain")
    assert r.status_code == 400
    assert r.text == "Only PDF files are allowed!"
    assert client.get("/pdfs").json() == []
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_rejects_missing_file(client):
    r = client.post("/upload", data={"other": "x"})
    assert r.status_code == 400
    assert r.text == "No file uploaded."


def test_rejects_oversized_upload(client, upload_dir):
    r = _upload(client, content=b"0" * (64 * 1024 + 1))
    assert r.status_code == 400
    assert r.text == "File too large."
    assert client.get("/pdfs").json() == []
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_list_is_newest_first(client):
    _upload(client, name="first.pdf")
    _upload(client, name="second.pdf")
    names = [f["original_name"] for f in client.get("/pdfs").json()]
    assert names == ["second.pdf", "first.pdf"]


def test_same_name_uploads_get_distinct_stored_names(client, upload_dir):
    _upload(client, name="dup.pdf")
    _upload(client, name="dup.pdf")
    stored = {f["filename"] for f in client.get("/pdfs").json()}
    assert len(stored) == 2
    assert len(list(upload_dir.iterdir())) == 2


def test_failed_metadata_insert_removes_written_file(client, upload_dir, monkeypatch):
    def boom(self, record):
        raise OperationalError("INSERT INTO filerecord", {}, Exception("disk I/O error"))

    monkeypatch.setattr(repositories.FileRecordRepository, "create", boom)
    r = _upload(client)
    assert r.status_code == 500
    assert r.text == "Error saving file metadata."
    assert list(upload_dir.iterdir()) == []


def test_delete_single_removes_record_and_file(client, upload_dir):
    _upload(client, name="keep.pdf")
    _upload(client, name="drop.pdf")
    files = client.get("/pdfs").json()
    drop = next(f for f in files if f["original_name"] == "drop.pdf")

    r = client.delete(f"/pdfs/{drop['id']}/delete")
    assert r.status_code == 200
    assert r.text == "PDF file deleted successfully"

    remaining = client.get("/pdfs").json()
    assert [f["original_name"] for f in remaining] == ["keep.pdf"]
    assert not (upload_dir / drop["filename"]).exists()
    assert (upload_dir / remaining[0]["filename"]).exists()


def test_delete_succeeds_when_file_already_gone(client, upload_dir):
    _upload(client)
    rec = client.get("/pdfs").json()[0]
    (upload_dir / rec["filename"]).unlink()
    r = client.delete(f"/pdfs/{rec['id']}/delete")
    assert r.status_code == 200
    assert client.get("/pdfs").json() == []


def test_delete_unknown_id_is_404(client):
    r = client.delete("/pdfs/9999/delete")
    assert r.status_code == 404
    assert r.text == "PDF file not found"


def test_clear_reports_every_item(client, upload_dir):
    for name in ("a.pdf", "b.pdf", "c.pdf"):
        _upload(client, name=name)
    files = client.get("/pdfs").json()
    missing = next(f for f in files if f["original_name"] == "b.pdf")
    (upload_dir / missing["filename"]).unlink()

    r = client.delete("/pdfs/clear")
    assert r.status_code == 200
    report = r.json()
    assert report["deleted"] == 3
    assert report["failed"] == 1
    by_id = {item["id"]: item for item in report["results"]}
    assert set(by_id) == {f["id"] for f in files}
    assert by_id[missing["id"]]["file_removed"] is False
    assert by_id[missing["id"]]["error"]
    assert sum(1 for item in report["results"] if item["file_removed"]) == 2

    assert client.get("/pdfs").json() == []
    assert list(upload_dir.iterdir()) == []


def test_clear_on_empty_store(client):
    r = client.delete("/pdfs/clear")
    assert r.status_code == 200
    assert r.json()["deleted"] == 0
    assert r.json()["results"] == []


def test_list_store_failure_is_generic_500(client, monkeypatch):
    def boom(self):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(repositories.FileRecordRepository, "list_newest_first", boom)
    r = client.get("/pdfs")
    assert r.status_code == 500
    assert r.text == "Error fetching PDF files."


def test_rejects_more_than_one_file(client, upload_dir):
    files = [
        ("pdfFile", ("a.pdf", PDF_BYTES, "application/pdf")),
        ("pdfFile", ("b.pdf", PDF_BYTES, "application/pdf")),
    ]
    r = client.post("/upload", files=files)
    assert r.status_code == 400
    assert r.text == "Only one file may be uploaded."
    assert client.get("/pdfs").json() == []
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_rejects_file_under_other_field(client, upload_dir):
    files = [
        ("pdfFile", ("a.pdf", PDF_BYTES, "application/pdf")),
        ("attachment", ("b.pdf", PDF_BYTES, "application/pdf")),
    ]
    r = client.post("/upload", files=files)
    assert r.status_code == 400
    assert r.text == "Unexpected file field: attachment"
    assert client.get("/pdfs").json() == []
    assert not upload_dir.exists() or list(upload_dir.iterdir()) == []


def test_text_value_for_file_field_is_missing_file(client):
    r = client.post("/upload", data={"pdfFile": "notes.pdf"})
    assert r.status_code == 400
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text == "No file uploaded."


def test_clear_store_failure_keeps_files(client, upload_dir, monkeypatch):
    _upload(client)
    rec = client.get("/pdfs").json()[0]

    def boom(self, records):
        raise OperationalError("DELETE FROM filerecord", {}, Exception("database is locked"))

    monkeypatch.setattr(repositories.FileRecordRepository, "delete_many", boom)
    r = client.delete("/pdfs/clear")
    assert r.status_code == 500
    assert r.text == "Error clearing PDF files."
    assert [f["id"] for f in client.get("/pdfs").json()] == [rec["id"]]
    assert (upload_dir / rec["filename"]).exists()
