import pytest


@pytest.mark.asyncio
async def test_wardrobe_crud(client, test_user):
    created = await client.post(
        "/v1/wardrobe",
        json={"name": "Rain shell", "type": "jacket", "category": "outerwear", "weather": ["rainy"], "occasions": ["hiking"]},
    )
    assert created.status_code == 200
    item = created.json()
    assert item["weather"] == ["rainy"]

    updated = await client.put(f"/v1/wardrobe/{item['id']}", json={"name": "Packable rain shell"})
    assert updated.status_code == 200
    assert updated.json()["name"] == "Packable rain shell"
    assert updated.json()["category"] == "outerwear"

    listed = (await client.get("/v1/wardrobe")).json()
    assert [i["id"] for i in listed] == [item["id"]]

    assert (await client.delete(f"/v1/wardrobe/{item['id']}")).status_code == 204
    assert (await client.delete(f"/v1/wardrobe/{item['id']}")).status_code == 404
    assert (await client.get("/v1/wardrobe")).json() == []


@pytest.mark.asyncio
async def test_wardrobe_requires_name_type_category(client, test_user):
    resp = await client.post("/v1/wardrobe", json={"name": "Mystery", "type": "top"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "missing_required_fields"
