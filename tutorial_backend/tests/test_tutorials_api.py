from tutorial_backend.db import get_conn


def _count_rows() -> int:
    with get_conn() as conn:
        return conn.execute("SELECT COUNT(1) AS cnt FROM tutorial").fetchone()["cnt"]


def _create(client, **fields):
    res = client.post("/tutorials", json=fields)
    assert res.status_code == 200, res.text
    return res.json()


def test_create_requires_title(client):
    for body in ({}, {"title": ""}, {"title": None}, {"description": "no title"}):
        res = client.post("/tutorials", json=body)
        assert res.status_code == 400
        assert res.json() == {"message": "title can not be empty!"}
    assert _count_rows() == 0


def test_create_without_body_is_rejected(client):
    res = client.post("/tutorials")
    assert res.status_code == 400
    assert res.json() == {"message": "title can not be empty!"}
    assert _count_rows() == 0


def test_create_with_wrong_type_is_400(client):
    res = client.post("/tutorials", json={"title": ["x"]})
    assert res.status_code == 400
    assert "title" in res.json()["message"]
    assert _count_rows() == 0


def test_create_defaults_and_fields(client):
    t = _create(client, title="FastAPI", description="routers and deps")
    assert t["published"] is False
    assert t["description"] == "routers and deps"

    p = _create(client, title="SQLite", published=True)
    assert p["published"] is True
    assert p["id"] == t["id"] + 1


def test_find_all_and_title_filter(client):
    a = _create(client, title="Learn Python")
    b = _create(client, title="python tips")
    c = _create(client, title="Advanced Python typing")
    _create(client, title="Rust in action")

    everything = client.get("/tutorials").json()
    assert len(everything) == 4

    res = client.get("/tutorials", params={"title": "Python"})
    assert res.status_code == 200
    assert [t["id"] for t in res.json()] == [a["id"], c["id"]]

    res = client.get("/tutorials", params={"title": "python"})
    assert [t["id"] for t in res.json()] == [b["id"]]

    # empty filter behaves like no filter
    assert len(client.get("/tutorials", params={"title": ""}).json()) == 4


def test_filter_treats_wildcards_literally(client):
    _create(client, title="100% coverage")
    _create(client, title="1000 tests")
    res = client.get("/tutorials", params={"title": "0%"})
    assert [t["title"] for t in res.json()] == ["100% coverage"]


def test_find_one(client):
    t = _create(client, title="Docker")
    res = client.get(f"/tutorials/{t['id']}")
    assert res.status_code == 200
    assert res.json() == t

    missing = client.get("/tutorials/999")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Cannot find Tutorial with id=999."}

    bad = client.get("/tutorials/abc")
    assert bad.status_code == 404
    assert bad.json() == {"message": "Cannot find Tutorial with id=abc."}


def test_update(client):
    t = _create(client, title="Draft", description="old")
    res = client.put(f"/tutorials/{t['id']}", json={"title": "Final", "description": None})
    assert res.status_code == 200

    got = client.get(f"/tutorials/{t['id']}").json()
    assert got == {"id": t["id"], "title": "Final", "description": None, "published": False}


def test_update_nonexistent_or_empty(client):
    msg = "Cannot update Tutorial with id={}. Maybe Tutorial was not found or req.body is empty!"
    res = client.put("/tutorials/42", json={"title": "x"})
    assert res.status_code == 400
    assert res.json() == {"message": msg.format(42)}

    t = _create(client, title="Kept")
    res = client.put(f"/tutorials/{t['id']}", json={})
    assert res.status_code == 400
    assert res.json() == {"message": msg.format(t["id"])}

    # unknown fields and id are not updatable
    res = client.put(f"/tutorials/{t['id']}", json={"id": 77, "color": "red"})
    assert res.status_code == 400
    assert client.get(f"/tutorials/{t['id']}").json()["title"] == "Kept"


def test_update_cannot_blank_title(client):
    t = _create(client, title="Keep me")
    res = client.put(f"/tutorials/{t['id']}", json={"title": ""})
    assert res.status_code == 400
    assert res.json() == {"message": "title can not be empty!"}
    assert client.get(f"/tutorials/{t['id']}").json()["title"] == "Keep me"


def test_update_null_published_is_ignored(client):
    t = _create(client, title="Flag", published=True)
    res = client.put(f"/tutorials/{t['id']}", json={"published": None, "description": "d"})
    assert res.status_code == 200
    got = client.get(f"/tutorials/{t['id']}").json()
    assert got["published"] is True
    assert got["description"] == "d"


def test_delete(client):
    t = _create(client, title="Temp")
    res = client.delete(f"/tutorials/{t['id']}")
    assert res.status_code == 200
    assert res.json() == {"message": "Tutorial was deleted successfully!"}

    assert client.get(f"/tutorials/{t['id']}").status_code == 404

    again = client.delete(f"/tutorials/{t['id']}")
    assert again.status_code == 404
    assert again.json() == {"message": f"Cannot delete Tutorial with id={t['id']}. Maybe Tutorial was not found!"}


def test_delete_all_reports_count(client):
    for i in range(3):
        _create(client, title=f"T{i}")
    res = client.delete("/tutorials")
    assert res.status_code == 200
    assert res.json() == {"message": "3 Tutorials were deleted successfully!"}
    assert client.get("/tutorials").json() == []

    res = client.delete("/tutorials")
    assert res.json() == {"message": "0 Tutorials were deleted successfully!"}


def test_published_listing(client):
    _create(client, title="a", published=True)
    _create(client, title="b")
    _create(client, title="c", published=True)
    res = client.get("/tutorials/published")
    assert res.status_code == 200
    assert [t["title"] for t in res.json()] == ["a", "c"]


def test_ids_outside_integer_range_are_not_found(client):
    _create(client, title="Only one")
    big = "99999999999999999999"

    res = client.get(f"/tutorials/{big}")
    assert res.status_code == 404
    assert res.json() == {"message": f"Cannot find Tutorial with id={big}."}

    res = client.put(f"/tutorials/{big}", json={"title": "x"})
    assert res.status_code == 400
    assert res.json()["message"].startswith(f"Cannot update Tutorial with id={big}.")

    res = client.delete(f"/tutorials/-{big}")
    assert res.status_code == 404
    assert res.json()["message"].startswith(f"Cannot delete Tutorial with id=-{big}.")

    assert _count_rows() == 1
