from fastapi.testclient import TestClient


class TestTodos:
    def test_todo_lifecycle(
        self, test_client: TestClient, u1_headers: dict[str, str]
    ) -> None:
        """Create, read, update, and delete a todo as its owner."""
        response = test_client.post(
            "/todos", json={"title": "  Buy milk  "}, headers=u1_headers
        )
        assert response.status_code == 201
        created = response.json()
        assert created["title"] == "Buy milk"
        assert created["completed"] is False
        assert created["ownerId"] == "U1"
        assert set(created["createdAt"]) == {"seconds", "nanoseconds"}

        todo_path = f"/todos/{created['id']}"

        response = test_client.get(todo_path, headers=u1_headers)
        assert response.status_code == 200
        assert response.json()["title"] == "Buy milk"

        response = test_client.put(
            todo_path,
            json={"title": "Buy oat milk", "completed": True},
            headers=u1_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Todo updated successfully."

        response = test_client.get(todo_path, headers=u1_headers)
        stored = response.json()
        assert stored["title"] == "Buy oat milk"
        assert stored["completed"] is True
        assert stored["ownerId"] == "U1"
        assert stored["createdAt"] == created["createdAt"]
        assert "updatedAt" in stored

        response = test_client.delete(todo_path, headers=u1_headers)
        assert response.status_code == 204

        assert test_client.get(todo_path, headers=u1_headers).status_code == 404
        assert test_client.delete(todo_path, headers=u1_headers).status_code == 404

    def test_list_todos_is_scoped_and_ordered(
        self,
        test_client: TestClient,
        u1_headers: dict[str, str],
        u2_headers: dict[str, str],
    ) -> None:
        assert test_client.get("/todos", headers=u1_headers).json() == []

        ids = [
            test_client.post(
                "/todos", json={"title": f"Task {i}"}, headers=u1_headers
            ).json()["id"]
            for i in range(3)
        ]
        test_client.post("/todos", json={"title": "Other"}, headers=u2_headers)

        response = test_client.get("/todos", headers=u1_headers)
        assert response.status_code == 200
        assert [todo["id"] for todo in response.json()] == list(reversed(ids))
        assert len(test_client.get("/todos", headers=u2_headers).json()) == 1

    def test_other_users_cannot_touch_todo(
        self,
        test_client: TestClient,
        u1_headers: dict[str, str],
        u2_headers: dict[str, str],
    ) -> None:
        created = test_client.post(
            "/todos", json={"title": "Private"}, headers=u1_headers
        ).json()
        todo_path = f"/todos/{created['id']}"

        assert test_client.get(todo_path, headers=u2_headers).status_code == 403
        assert (
            test_client.put(
                todo_path, json={"completed": True}, headers=u2_headers
            ).status_code
            == 403
        )
        assert test_client.delete(todo_path, headers=u2_headers).status_code == 403

        assert test_client.get(todo_path, headers=u1_headers).json() == created

    def test_invalid_updates_leave_todo_unchanged(
        self, test_client: TestClient, u1_headers: dict[str, str]
    ) -> None:
        created = test_client.post(
            "/todos", json={"title": "Buy milk"}, headers=u1_headers
        ).json()
        todo_path = f"/todos/{created['id']}"

        assert test_client.put(todo_path, json={}, headers=u1_headers).status_code == 400
        assert (
            test_client.put(
                todo_path, json={"completed": "yes"}, headers=u1_headers
            ).status_code
            == 400
        )
        assert test_client.get(todo_path, headers=u1_headers).json() == created

    def test_requests_without_token_are_rejected(self, test_client: TestClient) -> None:
        assert test_client.get("/todos").status_code == 401
        assert (
            test_client.post(
                "/todos",
                json={"title": "x"},
                headers={"Authorization": "Bearer wrong"},
            ).status_code
            == 401
        )


class TestHealthcheck:
    def test_healthcheck_success(self, test_client: TestClient) -> None:
        response = test_client.get("/healthcheck")
        assert response.status_code == 200
        data = response.json()
        assert data["api"]["status"] == "ok"
        assert data["redis"]["status"] == "ok"
