"""End-to-end editing workflows over the HTTP API."""


async def create_note(client, headers, title="T1", content="body1"):
    resp = await client.post("/api/notes/", json={"title": title, "content": content}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["id"]


async def test_edit_conflict_save_and_restore(async_client, auth_headers):
    alice, bob = auth_headers("alice"), auth_headers("bob")

    note_id = await create_note(async_client, alice)
    resp = await async_client.put(
        f"/api/notes/{note_id}/permissions",
        json={"visibility": "shared_write", "write_grants": ["bob"]},
        headers=alice,
    )
    assert resp.status_code == 200

    # alice takes the lock, bob is refused
    assert (await async_client.post(f"/api/notes/{note_id}/lock", headers=alice)).status_code == 200
    resp = await async_client.post(f"/api/notes/{note_id}/lock", headers=bob)
    assert resp.status_code == 409
    assert resp.json()["details"]["locked_by"] == "alice"

    resp = await async_client.get(f"/api/notes/{note_id}/lock-status", headers=bob)
    assert resp.json()["locked_by"] == "alice"
    assert resp.json()["can_edit"] is False

    # alice saves version 2, which releases her lock
    resp = await async_client.put(
        f"/api/notes/{note_id}", json={"title": "T2", "content": "body2"}, headers=alice
    )
    assert resp.status_code == 200
    assert resp.json()["version_number"] == 2

    resp = await async_client.get(f"/api/notes/{note_id}/lock-status", headers=bob)
    assert resp.json()["locked"] is False
    assert resp.json()["can_edit"] is True

    # bob can now lock without a stale conflict, then restores version 1
    assert (await async_client.post(f"/api/notes/{note_id}/lock", headers=bob)).status_code == 200
    resp = await async_client.post(
        f"/api/notes/{note_id}/restore", json={"version_number": 1}, headers=bob
    )
    assert resp.status_code == 200
    assert resp.json()["title"] == "T1"
    assert resp.json()["content"] == "body1"

    resp = await async_client.get(f"/api/notes/{note_id}/versions", headers=alice)
    history = resp.json()
    assert [v["version_number"] for v in history] == [3, 2, 1]
    assert history[0]["content"] == history[2]["content"]
    assert history[0]["created_by"] == "bob"

    resp = await async_client.get(f"/api/notes/{note_id}/compare/2/3", headers=alice)
    assert resp.json()["title_changed"] is True
    assert resp.json()["content_changed"] is True

    # restore released bob's lock too
    resp = await async_client.get(f"/api/notes/{note_id}/lock-status", headers=alice)
    assert resp.json()["locked"] is False


async def test_outsider_cannot_touch_private_note(async_client, auth_headers):
    alice, carol = auth_headers("alice"), auth_headers("carol")
    note_id = await create_note(async_client, alice)

    resp = await async_client.post(f"/api/notes/{note_id}/lock", headers=carol)
    assert resp.status_code == 403
    resp = await async_client.get(f"/api/notes/{note_id}/versions", headers=carol)
    assert resp.status_code == 403
    resp = await async_client.get(f"/api/notes/{note_id}", headers=carol)
    assert resp.status_code == 403

    # no lock was left behind by the refused attempt
    resp = await async_client.get(f"/api/notes/{note_id}/lock-status", headers=alice)
    assert resp.json()["locked"] is False


async def test_leaving_a_share_revokes_edit_access(async_client, auth_headers):
    alice, bob = auth_headers("alice"), auth_headers("bob")
    note_id = await create_note(async_client, alice)
    await async_client.put(
        f"/api/notes/{note_id}/permissions",
        json={"visibility": "shared_write", "read_grants": ["bob"], "write_grants": ["bob"]},
        headers=alice,
    )

    resp = await async_client.delete(f"/api/notes/{note_id}/sharing", headers=bob)
    assert resp.status_code == 200

    resp = await async_client.post(f"/api/notes/{note_id}/lock", headers=bob)
    assert resp.status_code == 403


async def test_deleting_note_removes_locks_and_versions(async_client, auth_headers):
    alice = auth_headers("alice")
    note_id = await create_note(async_client, alice)
    await async_client.post(f"/api/notes/{note_id}/lock", headers=alice)

    resp = await async_client.delete(f"/api/notes/{note_id}", headers=alice)
    assert resp.status_code == 204

    resp = await async_client.get(f"/api/notes/{note_id}/versions", headers=alice)
    assert resp.status_code == 404
    resp = await async_client.get(f"/api/notes/{note_id}/lock-status", headers=alice)
    assert resp.status_code == 404
