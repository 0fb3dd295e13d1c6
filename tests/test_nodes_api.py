from __future__ import annotations


def test_requires_authentication(client, tree):
    assert client.get("/api/nodes").status_code == 401
    res = client.get("/api/nodes", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_list_accessible_nodes(client, auth, tree):
    res = client.get("/api/nodes", headers=auth("nb_manager"))

    assert res.status_code == 200
    names = {n["name"] for n in res.json()["nodes"]}
    assert names == {"Novi Beograd", "Bezanija", "Radnja 6"}
    assert res.json()["count"] == 3


def test_ceo_sees_all_nodes(client, auth, tree):
    res = client.get("/api/nodes", headers=auth("ceo"))
    assert res.json()["count"] == 8


def test_node_detail_denormalizes_parent_and_ancestors(client, auth, tree):
    res = client.get(f"/api/nodes/{tree['bezanija']}", headers=auth("nb_manager"))

    assert res.status_code == 200
    node = res.json()["node"]
    assert node["name"] == "Bezanija"
    assert node["parentId"] == tree["novi_beograd"]
    assert node["parent"] == {"id": tree["novi_beograd"], "name": "Novi Beograd", "type": "office"}
    assert node["ancestors"] == [tree["srbija"], tree["grad_beograd"], tree["novi_beograd"]]
    assert [a["name"] for a in node["ancestorNodes"]] == ["Srbija", "Grad Beograd", "Novi Beograd"]


def test_node_outside_scope_is_forbidden(client, auth, tree):
    res = client.get(f"/api/nodes/{tree['vojvodina']}", headers=auth("nb_manager"))
    assert res.status_code == 403


def test_missing_node_is_not_found(client, auth, tree):
    res = client.get("/api/nodes/9999", headers=auth("nb_manager"))
    assert res.status_code == 404


def test_descendants(client, auth, tree):
    res = client.get(f"/api/nodes/{tree['novi_beograd']}/descendants", headers=auth("nb_manager"))

    assert res.status_code == 200
    assert {n["name"] for n in res.json()["descendants"]} == {"Bezanija", "Radnja 6"}
    assert res.json()["count"] == 2


def test_children_are_direct_only(client, auth, tree):
    res = client.get(f"/api/nodes/{tree['novi_beograd']}/children", headers=auth("nb_manager"))

    assert res.status_code == 200
    assert res.json()["count"] == 1
    assert res.json()["children"][0]["name"] == "Bezanija"


def test_children_of_inaccessible_node(client, auth, tree):
    res = client.get(f"/api/nodes/{tree['srbija']}/children", headers=auth("bez_employee"))
    assert res.status_code == 403


def test_create_node_under_descendant(client, auth, tree):
    res = client.post(
        "/api/nodes",
        headers=auth("nb_manager"),
        json={"name": "New Store", "type": "store", "parentId": tree["bezanija"]},
    )

    assert res.status_code == 201
    node = res.json()["node"]
    assert node["ancestors"] == [tree["srbija"], tree["grad_beograd"], tree["novi_beograd"], tree["bezanija"]]
    assert node["parent"]["name"] == "Bezanija"


def test_create_node_under_inaccessible_parent(client, auth, tree):
    res = client.post(
        "/api/nodes",
        headers=auth("nb_manager"),
        json={"name": "X", "type": "office", "parentId": tree["vojvodina"]},
    )
    assert res.status_code == 403


def test_create_node_under_missing_parent(client, auth, tree):
    res = client.post(
        "/api/nodes", headers=auth("nb_manager"), json={"name": "X", "type": "office", "parentId": 9999}
    )
    assert res.status_code == 404


def test_employee_cannot_create_node(client, auth, tree):
    res = client.post(
        "/api/nodes",
        headers=auth("bez_employee"),
        json={"name": "X", "type": "office", "parentId": tree["bezanija"]},
    )
    assert res.status_code == 403


def test_create_node_validation(client, auth, tree):
    headers = auth("nb_manager")
    assert client.post("/api/nodes", headers=headers, json={"name": "X", "type": "kiosk"}).status_code == 400
    assert client.post("/api/nodes", headers=headers, json={"type": "office"}).status_code == 400
    assert client.post("/api/nodes", headers=headers, json={"name": "", "type": "office"}).status_code == 400


def test_update_node(client, auth, tree):
    res = client.put(
        f"/api/nodes/{tree['radnja6']}", headers=auth("nb_manager"), json={"name": "Radnja 6 Plus"}
    )

    assert res.status_code == 200
    assert res.json()["node"]["name"] == "Radnja 6 Plus"
    assert res.json()["node"]["type"] == "store"


def test_update_node_invalid_type(client, auth, tree):
    res = client.put(f"/api/nodes/{tree['radnja6']}", headers=auth("nb_manager"), json={"type": "mall"})
    assert res.status_code == 400


def test_update_ancestor_forbidden(client, auth, tree):
    res = client.put(f"/api/nodes/{tree['srbija']}", headers=auth("nb_manager"), json={"name": "X"})
    assert res.status_code == 403


def test_delete_own_node(client, auth, tree):
    res = client.delete(f"/api/nodes/{tree['novi_beograd']}", headers=auth("nb_manager"))

    assert res.status_code == 400
    assert "own node" in res.json()["detail"]


def test_delete_node_with_children(client, auth, tree):
    res = client.delete(f"/api/nodes/{tree['bezanija']}", headers=auth("nb_manager"))

    assert res.status_code == 400
    assert "children" in res.json()["detail"]


def test_delete_node_with_users(client, auth, tree):
    res = client.delete(f"/api/nodes/{tree['radnja6']}", headers=auth("nb_manager"))

    assert res.status_code == 400
    assert "users" in res.json()["detail"]


def test_delete_empty_leaf(client, auth, tree):
    headers = auth("ceo")
    res = client.delete(f"/api/nodes/{tree['radnja1']}", headers=headers)

    assert res.status_code == 200
    assert res.json() == {"message": "Node deleted successfully"}
    assert client.get(f"/api/nodes/{tree['radnja1']}", headers=headers).status_code == 404


def test_delete_ancestor_forbidden(client, auth, tree):
    res = client.delete(f"/api/nodes/{tree['srbija']}", headers=auth("nb_manager"))
    assert res.status_code == 403


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_unknown_api_route(client):
    res = client.get("/api/unknown")
    assert res.status_code == 404
    assert res.json() == {"detail": "Route not found"}
