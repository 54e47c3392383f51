# flake8: noqa


def _create(client, title):
    res = client.post("/recipes", json={"title": title})
    assert res.status_code == 200
    return res.json()["id"]


def test_root_status_text(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.text == "My Cuisine API is running"


def test_create_and_get_recipe(client):
    res = client.post("/recipes", json={"title": "  Simple Pancakes  "})
    assert res.status_code == 200
    obj = res.json()
    assert obj["title"] == "Simple Pancakes"
    assert isinstance(obj["id"], int) and obj["id"] > 0

    res = client.get(f"/recipes/{obj['id']}")
    assert res.status_code == 200
    data = res.json()
    assert data["title"] == "Simple Pancakes"
    assert data["photo"] is None
    assert data["is_favorite"] is False
    assert data["created_at"] == data["updated_at"]


def test_blank_title_is_rejected(client):
    for payload in ({"title": ""}, {"title": "   "}, {}, {"title": None}, {"title": 5}):
        res = client.post("/recipes", json=payload)
        assert res.status_code == 400
        assert res.json() == {"message": "Title is required"}


def test_missing_body_is_rejected(client):
    res = client.post("/recipes")
    assert res.status_code == 400
    assert res.json()["message"] == "Title is required"


def test_ids_are_not_reused(client):
    first = _create(client, "First")
    client.delete(f"/recipes/{first}")
    second = _create(client, "Second")
    assert second > first


def test_list_recipes_newest_first(client):
    ids = [_create(client, name) for name in ("A", "B", "C")]
    res = client.get("/recipes")
    assert res.status_code == 200
    assert [r["id"] for r in res.json()] == list(reversed(ids))


def test_get_missing_recipe(client):
    res = client.get("/recipes/9999")
    assert res.status_code == 404
    assert res.json() == {"message": "Not found"}


def test_non_integer_id_is_a_validation_error(client):
    res = client.get("/recipes/abc")
    assert res.status_code == 400
    assert "message" in res.json()


def test_update_title(client, clock):
    rid = _create(client, "Old")
    before = client.get(f"/recipes/{rid}").json()

    res = client.put(f"/recipes/{rid}", json={"title": " New "})
    assert res.status_code == 200
    assert res.json() == {"success": True}

    after = client.get(f"/recipes/{rid}").json()
    assert after["title"] == "New"
    assert after["updated_at"] > before["updated_at"]
    assert after["created_at"] == before["created_at"]


def test_update_title_validation(client):
    rid = _create(client, "Keep")
    res = client.put(f"/recipes/{rid}", json={"title": "  "})
    assert res.status_code == 400
    assert res.json() == {"message": "Title is required"}
    assert client.get(f"/recipes/{rid}").json()["title"] == "Keep"


def test_favorites_ordered_by_last_update(client, clock):
    a = _create(client, "A")
    b = _create(client, "B")
    c = _create(client, "C")

    client.patch(f"/recipes/{a}/favorite", json={"isFavorite": True})
    client.patch(f"/recipes/{b}/favorite", json={"isFavorite": True})
    client.patch(f"/recipes/{c}/favorite", json={"isFavorite": True})
    client.patch(f"/recipes/{b}/favorite", json={"isFavorite": False})
    client.patch(f"/recipes/{a}/favorite", json={"isFavorite": 1})

    res = client.get("/recipes/favorites")
    assert res.status_code == 200
    favorites = res.json()
    assert [r["id"] for r in favorites] == [a, c]
    assert all(r["is_favorite"] is True for r in favorites)


def test_favorite_flag_truthiness(client):
    rid = _create(client, "Flag")
    for value, expected in (("yes", True), (0, False), ("", False), (None, False), ([], True)):
        client.patch(f"/recipes/{rid}/favorite", json={"isFavorite": value})
        assert client.get(f"/recipes/{rid}").json()["is_favorite"] is expected

    client.patch(f"/recipes/{rid}/favorite", json={"isFavorite": True})
    client.patch(f"/recipes/{rid}/favorite", json={})
    assert client.get(f"/recipes/{rid}").json()["is_favorite"] is False


def test_favorite_on_missing_recipe_succeeds(client):
    res = client.patch("/recipes/4242/favorite", json={"isFavorite": True})
    assert res.status_code == 200
    assert res.json() == {"success": True}
    assert client.get("/recipes/favorites").json() == []


def test_delete_recipe(client):
    rid = _create(client, "Gone")
    res = client.delete(f"/recipes/{rid}")
    assert res.status_code == 200
    assert res.json() == {"success": True}
    assert client.get(f"/recipes/{rid}").status_code == 404

    # deleting again still reports success
    res = client.delete(f"/recipes/{rid}")
    assert res.json() == {"success": True}


def test_delete_cascades_to_owned_rows(client):
    rid = _create(client, "Soup")
    other = _create(client, "Salad")
    client.post(f"/recipes/{rid}/ingredients", json={"name": "water", "quantity": 1, "unit": "l"})
    client.post(f"/recipes/{rid}/instructions", json={"text": "Boil"})
    client.post(f"/recipes/{other}/ingredients", json={"name": "lettuce", "quantity": 1, "unit": "head"})

    client.delete(f"/recipes/{rid}")

    assert client.get(f"/recipes/{rid}/ingredients").json() == []
    assert client.get(f"/recipes/{rid}/instructions").json() == []
    assert len(client.get(f"/recipes/{other}/ingredients").json()) == 1


def test_cors_allows_any_origin(client):
    res = client.get("/recipes", headers={"Origin": "http://localhost:5173"})
    assert res.headers.get("access-control-allow-origin") == "*"


def test_request_id_header(client):
    res = client.get("/recipes")
    assert res.headers.get("X-Request-ID")


def test_non_object_body_reports_missing_title(client):
    for payload in ([], "Pancakes", 42):
        res = client.post("/recipes", json=payload)
        assert res.status_code == 400
        assert res.json() == {"message": "Title is required"}
