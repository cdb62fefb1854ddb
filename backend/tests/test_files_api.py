"""Test upload, listing and deletion endpoints."""

import asyncio
import re

import pytest
from httpx import AsyncClient


async def _upload(client: AsyncClient, filename: str, content: bytes = b"hello", content_type: str = "text/plain"):
    resp = await client.post("/api/upload", files={"file": (filename, content, content_type)})
    assert resp.status_code == 200, resp.text
    return resp.json()["file"]


@pytest.mark.asyncio
async def test_list_empty(client: AsyncClient):
    resp = await client.get("/api/files")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "files": []}


@pytest.mark.asyncio
async def test_upload_single(client: AsyncClient, upload_dir):
    resp = await client.post(
        "/api/upload",
        files={"file": ("report.pdf", b"%PDF-1.4 test", "application/pdf")},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True

    record = data["file"]
    assert re.fullmatch(r"report-\d{13}-\d{1,9}\.pdf", record["name"])
    assert record["originalName"] == "report.pdf"
    assert record["size"] == len(b"%PDF-1.4 test")
    assert record["type"] == "application/pdf"
    assert record["url"] == f"/uploads/{record['name']}"
    assert "uploadTime" in record
    assert (upload_dir / record["name"]).read_bytes() == b"%PDF-1.4 test"


@pytest.mark.asyncio
async def test_upload_same_name_twice_keeps_both(client: AsyncClient):
    first = await _upload(client, "report.pdf", b"first")
    second = await _upload(client, "report.pdf", b"second")

    assert first["name"] != second["name"]

    resp = await client.get(first["url"])
    assert resp.status_code == 200
    assert resp.content == b"first"
    resp = await client.get(second["url"])
    assert resp.status_code == 200
    assert resp.content == b"second"


@pytest.mark.asyncio
async def test_upload_response_matches_listing(client: AsyncClient):
    uploaded = await _upload(client, "notes.txt", b"some notes")

    listed = (await client.get("/api/files")).json()["files"]
    assert len(listed) == 1
    assert listed[0]["name"] == uploaded["name"]
    assert listed[0]["size"] == uploaded["size"]
    assert listed[0]["uploadTime"] == uploaded["uploadTime"]
    assert "originalName" not in listed[0]


@pytest.mark.asyncio
async def test_upload_strips_client_directories(client: AsyncClient, upload_dir):
    record = await _upload(client, "../../etc/passwd.txt")
    assert record["originalName"] == "passwd.txt"
    assert (upload_dir / record["name"]).is_file()


@pytest.mark.asyncio
async def test_list_newest_first(client: AsyncClient):
    a = await _upload(client, "a.png", b"png", "image/png")
    await asyncio.sleep(0.05)
    b = await _upload(client, "b.txt", b"txt")

    files = (await client.get("/api/files")).json()["files"]
    assert [f["name"] for f in files] == [b["name"], a["name"]]


@pytest.mark.asyncio
async def test_upload_without_file(client: AsyncClient):
    resp = await client.post("/api/upload", data={"comment": "no file here"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "No file uploaded"}


@pytest.mark.asyncio
async def test_upload_wrong_field_name(client: AsyncClient):
    resp = await client.post("/api/upload", files={"upload": ("a.txt", b"x", "text/plain")})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_upload_too_large(client: AsyncClient, settings, upload_dir):
    content = b"x" * (settings.max_file_size + 1)
    resp = await client.post("/api/upload", files={"file": ("big.bin", content, "application/octet-stream")})
    assert resp.status_code == 413
    data = resp.json()
    assert data["success"] is False
    assert data["error"].startswith("File too large")
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_at_size_limit(client: AsyncClient, settings):
    content = b"x" * settings.max_file_size
    record = await _upload(client, "edge.bin", content, "application/octet-stream")
    assert record["size"] == settings.max_file_size


@pytest.mark.asyncio
async def test_upload_multiple_keeps_order(client: AsyncClient):
    files = [
        ("files", ("one.txt", b"1", "text/plain")),
        ("files", ("two.png", b"22", "image/png")),
        ("files", ("three.json", b"{}", "application/json")),
    ]
    resp = await client.post("/api/upload-multiple", files=files)
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert [f["originalName"] for f in data["files"]] == ["one.txt", "two.png", "three.json"]
    assert [f["size"] for f in data["files"]] == [1, 2, 2]

    listed = (await client.get("/api/files")).json()["files"]
    assert {f["name"] for f in listed} == {f["name"] for f in data["files"]}


@pytest.mark.asyncio
async def test_upload_multiple_without_files(client: AsyncClient):
    resp = await client.post("/api/upload-multiple", data={"comment": "nothing"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "No file uploaded"}


@pytest.mark.asyncio
async def test_upload_multiple_too_many(client: AsyncClient, settings, upload_dir):
    files = [("files", (f"f{i}.txt", b"x", "text/plain")) for i in range(settings.max_files + 1)]
    resp = await client.post("/api/upload-multiple", files=files)
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_multiple_oversize_rolls_back(client: AsyncClient, settings, upload_dir):
    files = [
        ("files", ("small.txt", b"ok", "text/plain")),
        ("files", ("big.bin", b"x" * (settings.max_file_size + 1), "application/octet-stream")),
    ]
    resp = await client.post("/api/upload-multiple", files=files)
    assert resp.status_code == 413
    assert "per file" in resp.json()["error"]
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_delete_file(client: AsyncClient):
    record = await _upload(client, "gone.txt")

    resp = await client.delete(f"/api/files/{record['name']}")
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    files = (await client.get("/api/files")).json()["files"]
    assert files == []

    resp = await client.delete(f"/api/files/{record['name']}")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "File not found"}


@pytest.mark.asyncio
async def test_delete_unknown_file(client: AsyncClient):
    resp = await client.delete("/api/files/never-uploaded.txt")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_delete_all(client: AsyncClient):
    for name in ("a.txt", "b.txt", "c.txt"):
        await _upload(client, name)

    resp = await client.delete("/api/files")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["deleted"] == 3

    assert (await client.get("/api/files")).json()["files"] == []


@pytest.mark.asyncio
async def test_delete_all_when_empty(client: AsyncClient):
    resp = await client.delete("/api/files")
    assert resp.status_code == 200
    assert resp.json()["deleted"] == 0


@pytest.mark.asyncio
async def test_listing_content_types(client: AsyncClient, upload_dir):
    (upload_dir / "x.svg").write_text("<svg/>")
    (upload_dir / "x.unknownext").write_bytes(b"\x00")

    files = (await client.get("/api/files")).json()["files"]
    types = {f["name"]: f["type"] for f in files}
    assert types == {"x.svg": "image/svg+xml", "x.unknownext": "application/octet-stream"}


@pytest.mark.asyncio
async def test_listing_is_idempotent(client: AsyncClient):
    await _upload(client, "a.txt")
    await _upload(client, "b.txt")

    first = (await client.get("/api/files")).json()
    second = (await client.get("/api/files")).json()
    assert first == second


@pytest.mark.asyncio
async def test_missing_upload_is_404(client: AsyncClient):
    resp = await client.get("/uploads/nope.txt")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_static_root_served(client: AsyncClient):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert "filehost" in resp.text


@pytest.mark.asyncio
async def test_cors_allows_any_origin(client: AsyncClient):
    resp = await client.get("/api/files", headers={"Origin": "http://example.com"})
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_upload_long_filename(client: AsyncClient, upload_dir):
    original = "a" * 240 + ".txt"
    record = await _upload(client, original, b"long name")

    assert record["originalName"] == original
    assert len(record["name"].encode("utf-8")) <= 255
    assert record["name"].endswith(".txt")
    assert (upload_dir / record["name"]).read_bytes() == b"long name"


@pytest.mark.asyncio
async def test_upload_file_field_as_text(client: AsyncClient, upload_dir):
    resp = await client.post("/api/upload", data={"file": "notafile"})
    assert resp.status_code == 400
    data = resp.json()
    assert data["success"] is False
    assert data["error"]
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_delete_directory_entry_is_500(client: AsyncClient, upload_dir):
    (upload_dir / "subdir").mkdir()

    resp = await client.delete("/api/files/subdir")
    assert resp.status_code == 500
    data = resp.json()
    assert data["success"] is False
    assert data["error"]
    assert (upload_dir / "subdir").is_dir()
