import pytest


@pytest.fixture
def chat(client, alice, bob):
    res = client.post(
        "/api/chats", json={"receiverId": bob["id"]}, headers=alice["headers"]
    )
    assert res.status_code == 201, res.text
    return res.json()


class TestOpenChat:
    def test_new_chat(self, chat, alice, bob):
        assert set(chat["userIds"]) == {alice["id"], bob["id"]}
        assert chat["receiver"]["id"] == bob["id"]
        assert chat["receiver"]["username"] == "bob"
        assert chat["unread"] == 0
        assert chat["lastMessage"] is None
        assert chat["postId"] is None

    def test_existing_chat_is_returned(self, client, chat, alice, bob):
        res = client.post(
            "/api/chats", json={"receiverId": alice["id"]}, headers=bob["headers"]
        )
        assert res.status_code == 200
        assert res.json()["id"] == chat["id"]
        assert res.json()["receiver"]["id"] == alice["id"]

    def test_chat_per_listing(self, client, chat, alice, bob, make_post):
        post = make_post(bob)
        res = client.post(
            "/api/chats",
            json={"receiverId": bob["id"], "postId": post["id"]},
            headers=alice["headers"],
        )
        assert res.status_code == 201
        assert res.json()["id"] != chat["id"]
        assert res.json()["postId"] == post["id"]

    def test_chat_with_self(self, client, alice):
        res = client.post(
            "/api/chats", json={"receiverId": alice["id"]}, headers=alice["headers"]
        )
        assert res.status_code == 400

    def test_unknown_receiver(self, client, alice, missing_id):
        for receiver in (missing_id, "nobody"):
            res = client.post(
                "/api/chats", json={"receiverId": receiver}, headers=alice["headers"]
            )
            assert res.status_code == 404
            assert res.json() == {"message": "Receiver not found"}

    def test_requires_authentication(self, client, bob):
        assert client.post("/api/chats", json={"receiverId": bob["id"]}).status_code == 401
        assert client.get("/api/chats").status_code == 401


class TestMessages:
    def send(self, client, chat_id, user, text):
        return client.post(
            f"/api/messages/{chat_id}", json={"text": text}, headers=user["headers"]
        )

    def test_send_updates_summary_and_unread(self, client, chat, alice, bob):
        res = self.send(client, chat["id"], alice, "Is it still available?")
        assert res.status_code == 201
        message = res.json()
        assert message["text"] == "Is it still available?"
        assert message["userId"] == alice["id"]
        assert message["chatId"] == chat["id"]

        bob_view = client.get("/api/chats", headers=bob["headers"]).json()
        assert bob_view[0]["unread"] == 1
        assert bob_view[0]["lastMessage"] == "Is it still available?"
        assert bob_view[0]["receiver"]["id"] == alice["id"]

        alice_view = client.get("/api/chats", headers=alice["headers"]).json()
        assert alice_view[0]["unread"] == 0

    def test_reading_chat_resets_unread(self, client, chat, alice, bob):
        self.send(client, chat["id"], alice, "Hello")
        self.send(client, chat["id"], alice, "Anyone?")

        res = client.get(f"/api/chats/{chat['id']}", headers=bob["headers"])
        assert res.status_code == 200
        assert [m["text"] for m in res.json()["messages"]] == ["Hello", "Anyone?"]
        assert res.json()["unread"] == 0
        assert client.get("/api/chats", headers=bob["headers"]).json()[0]["unread"] == 0

    def test_mark_read(self, client, chat, alice, bob):
        self.send(client, chat["id"], bob, "Yes it is")
        res = client.put(f"/api/chats/read/{chat['id']}", headers=alice["headers"])
        assert res.status_code == 200
        assert res.json()["unread"] == 0

    def test_recent_activity_comes_first(self, client, chat, alice, make_user):
        carol = make_user("carol")
        other = client.post(
            "/api/chats", json={"receiverId": carol["id"]}, headers=alice["headers"]
        ).json()

        self.send(client, chat["id"], alice, "bump")
        ids = [c["id"] for c in client.get("/api/chats", headers=alice["headers"]).json()]
        assert ids == [chat["id"], other["id"]]

        self.send(client, other["id"], alice, "bump again")
        ids = [c["id"] for c in client.get("/api/chats", headers=alice["headers"]).json()]
        assert ids == [other["id"], chat["id"]]

    def test_outsider_is_forbidden(self, client, chat, make_user):
        carol = make_user("carol")
        assert client.get(f"/api/chats/{chat['id']}", headers=carol["headers"]).status_code == 403
        assert self.send(client, chat["id"], carol, "hi").status_code == 403
        assert client.get("/api/chats", headers=carol["headers"]).json() == []

    def test_unknown_chat(self, client, alice, missing_id):
        assert self.send(client, missing_id, alice, "hi").status_code == 404
        assert client.get(f"/api/chats/{missing_id}", headers=alice["headers"]).status_code == 404
        assert client.get("/api/chats/nope", headers=alice["headers"]).status_code == 404

    def test_blank_text_is_rejected(self, client, chat, alice):
        res = self.send(client, chat["id"], alice, "   ")
        assert res.status_code == 400
        assert res.json()["message"] == "Validation failed"
