"""
Tests for file endpoints.
"""

import io

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_upload_file(client: AsyncClient, memory_storage, hello_file: dict):
    """Test uploading a file stores it under a generated key."""
    response = await client.post("/api/upload", files=hello_file)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "File uploaded successfully"
    assert data["size"] == 5
    assert data["fileName"].endswith("-hello.txt")
    assert data["fileName"].split("-", 1)[0].isdigit()
    assert data["url"] == f"memory://test-bucket/{data['fileName']}"

    stored = memory_storage._objects[data["fileName"]]
    assert stored.body == b"hello"
    assert stored.content_type == "text/plain"
    assert stored.metadata["originalName"] == "hello.txt"
    assert "uploadedAt" in stored.metadata


@pytest.mark.asyncio
async def test_upload_binary_file_keeps_exact_size(client: AsyncClient, memory_storage):
    content = bytes(range(256)) * 40
    files = {"file": ("blob.bin", io.BytesIO(content), "application/octet-stream")}

    response = await client.post("/api/upload", files=files)

    assert response.status_code == 200
    data = response.json()
    assert data["size"] == len(content)
    assert memory_storage._objects[data["fileName"]].body == content


@pytest.mark.asyncio
async def test_upload_without_file(client: AsyncClient):
    """Test a request with no file part is rejected with 400."""
    response = await client.post("/api/upload")

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "No file uploaded"
    assert "message" in data


@pytest.mark.asyncio
async def test_upload_with_wrong_field_name(client: AsyncClient, memory_storage):
    files = {"document": ("hello.txt", b"hello", "text/plain")}

    response = await client.post("/api/upload", files=files)

    assert response.status_code == 400
    assert response.json()["error"] == "No file uploaded"
    assert await memory_storage.list(100) == []


@pytest.mark.asyncio
async def test_upload_with_text_field_instead_of_file(client: AsyncClient, memory_storage):
    """A text value under the file field name is not an upload."""
    response = await client.post(
        "/api/upload",
        data={"file": "just some text"},
        files={"note": ("note.txt", b"x", "text/plain")},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "No file uploaded"
    assert await memory_storage.list(100) == []


@pytest.mark.asyncio
async def test_upload_too_large(client: AsyncClient, memory_storage, small_upload_limit):
    """Test files over the size cap are rejected, not truncated."""
    files = {"file": ("big.txt", b"0123456789", "text/plain")}

    response = await client.post("/api/upload", files=files)

    assert response.status_code == 413
    assert response.json()["error"] == "payload_too_large"
    assert await memory_storage.list(100) == []


@pytest.mark.asyncio
async def test_upload_at_size_limit(client: AsyncClient, small_upload_limit):
    files = {"file": ("edge.txt", b"x" * small_upload_limit, "text/plain")}

    response = await client.post("/api/upload", files=files)

    assert response.status_code == 200
    assert response.json()["size"] == small_upload_limit


@pytest.mark.asyncio
async def test_upload_backend_error(failing_client: AsyncClient, hello_file: dict):
    """Test backend write failures surface as 500 with the backend message."""
    response = await failing_client.post("/api/upload", files=hello_file)

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Failed to upload file"
    assert data["message"] == "connection refused"


@pytest.mark.asyncio
async def test_list_files_empty(client: AsyncClient):
    """Test listing files when the container is empty."""
    response = await client.get("/api/files")

    assert response.status_code == 200
    assert response.json() == {"files": [], "count": 0}


@pytest.mark.asyncio
async def test_list_files_after_upload(client: AsyncClient, hello_file: dict):
    upload = (await client.post("/api/upload", files=hello_file)).json()

    response = await client.get("/api/files")

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 1
    entry = data["files"][0]
    assert entry["key"] == upload["fileName"]
    assert entry["size"] == 5
    assert entry["url"] == upload["url"]
    assert "lastModified" in entry


@pytest.mark.asyncio
async def test_list_files_capped_at_100(client: AsyncClient, memory_storage):
    for i in range(105):
        await memory_storage.put(f"key-{i:03d}", b"x", "text/plain", {})

    response = await client.get("/api/files")

    data = response.json()
    assert data["count"] == 100
    assert len(data["files"]) == 100


@pytest.mark.asyncio
async def test_list_files_backend_error(failing_client: AsyncClient):
    response = await failing_client.get("/api/files")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to list files"


@pytest.mark.asyncio
async def test_get_file_signed_url(client: AsyncClient, hello_file: dict):
    """Test getting a signed URL for an uploaded file."""
    key = (await client.post("/api/upload", files=hello_file)).json()["fileName"]

    response = await client.get(f"/api/files/{key}")

    assert response.status_code == 200
    url = response.json()["url"]
    assert key in url
    assert "expires=" in url


@pytest.mark.asyncio
async def test_get_file_not_found(client: AsyncClient):
    """Test getting a never-uploaded key returns 404."""
    response = await client.get("/api/files/never-uploaded.txt")

    assert response.status_code == 404
    assert response.json()["error"] == "File not found"


@pytest.mark.asyncio
async def test_get_file_signing_error(unsignable_client: AsyncClient, hello_file: dict):
    """A signing failure is a 500, distinct from not found."""
    key = (await unsignable_client.post("/api/upload", files=hello_file)).json()["fileName"]

    response = await unsignable_client.get(f"/api/files/{key}")

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Failed to get file"
    assert data["message"] == "signing key unavailable"


@pytest.mark.asyncio
async def test_get_file_backend_error(failing_client: AsyncClient):
    response = await failing_client.get("/api/files/some-key")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to get file"


@pytest.mark.asyncio
async def test_delete_file(client: AsyncClient, hello_file: dict):
    """Test deleting an uploaded file removes it from listings."""
    key = (await client.post("/api/upload", files=hello_file)).json()["fileName"]

    response = await client.delete(f"/api/files/{key}")

    assert response.status_code == 200
    assert response.json() == {"message": "File deleted successfully"}

    listing = (await client.get("/api/files")).json()
    assert key not in [f["key"] for f in listing["files"]]


@pytest.mark.asyncio
async def test_delete_nonexistent_file(client: AsyncClient):
    """Test deleting a missing key is not an error."""
    response = await client.delete("/api/files/does-not-exist.txt")

    assert response.status_code == 200
    assert response.json()["message"] == "File deleted successfully"


@pytest.mark.asyncio
async def test_delete_twice(client: AsyncClient, hello_file: dict):
    key = (await client.post("/api/upload", files=hello_file)).json()["fileName"]

    first = await client.delete(f"/api/files/{key}")
    second = await client.delete(f"/api/files/{key}")

    assert first.status_code == 200
    assert second.status_code == 200


@pytest.mark.asyncio
async def test_delete_backend_error(failing_client: AsyncClient):
    response = await failing_client.delete("/api/files/some-key")

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Failed to delete file"
    assert data["message"] == "connection refused"


@pytest.mark.asyncio
async def test_full_workflow(client: AsyncClient):
    """Upload, list, get, delete, list again."""
    upload = await client.post(
        "/api/upload",
        files={"file": ("hello.txt", b"hello", "text/plain")},
    )
    assert upload.status_code == 200
    assert upload.json()["size"] == 5
    key = upload.json()["fileName"]

    listing = (await client.get("/api/files")).json()
    assert {"key": key, "size": 5}.items() <= next(
        f for f in listing["files"] if f["key"] == key
    ).items()

    fetched = await client.get(f"/api/files/{key}")
    assert fetched.status_code == 200
    assert key in fetched.json()["url"]

    deleted = await client.delete(f"/api/files/{key}")
    assert deleted.status_code == 200

    listing = (await client.get("/api/files")).json()
    assert all(f["key"] != key for f in listing["files"])
    assert listing["count"] == 0
