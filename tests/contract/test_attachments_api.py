from __future__ import annotations


def test_oversized_files_are_rejected_individually(api) -> None:
    resp = api.client.post(
        "/api/attachments",
        files=[
            ("files", ("note.txt", b"hello", "text/plain")),
            ("files", ("big.bin", b"x" * 64, "application/octet-stream")),
        ],
    )

    assert resp.status_code == 200
    data = resp.json()
    assert [a["name"] for a in data["accepted"]] == ["note.txt"]
    accepted = data["accepted"][0]
    assert accepted["size_bytes"] == 5
    assert accepted["data"] == "data:text/plain;base64,aGVsbG8="
    assert [r["filename"] for r in data["rejected"]] == ["big.bin"]
    assert data["rejected"][0]["limit_bytes"] == 16
