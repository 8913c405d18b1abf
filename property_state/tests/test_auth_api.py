class TestRegister:
    def test_register_and_login(self, client):
        res = client.post(
            "/api/auth/register",
            json={
                "username": "dana",
                "email": "Dana@Mail.com",
                "password": "secret123",
                "fullName": "Dana Doe",
            },
        )
        assert res.status_code == 201
        assert res.json() == {"message": "User created successfully"}

        res = client.post(
            "/api/auth/login", json={"username": "dana", "password": "secret123"}
        )
        assert res.status_code == 200
        body = res.json()
        assert body["username"] == "dana"
        assert body["email"] == "dana@mail.com"
        assert body["fullName"] == "Dana Doe"
        assert body["token"]
        assert "password" not in body
        assert "hashedPassword" not in body
        assert res.cookies.get("access_token") == body["token"]

    def test_duplicate_username_or_email(self, client, alice):
        res = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "other@mail.com", "password": "secret123"},
        )
        assert res.status_code == 400
        assert res.json() == {"message": "Username already taken"}

        res = client.post(
            "/api/auth/register",
            json={"username": "other", "email": "ALICE@mail.com", "password": "secret123"},
        )
        assert res.status_code == 400
        assert res.json() == {"message": "Email already registered"}

    def test_invalid_payload_is_a_validation_error(self, client):
        res = client.post(
            "/api/auth/register",
            json={"username": "ed", "email": "nope", "password": "1"},
        )
        assert res.status_code == 400
        body = res.json()
        assert body["message"] == "Validation failed"
        assert {tuple(d["loc"])[-1] for d in body["details"]} >= {
            "username",
            "email",
            "password",
        }


class TestLogin:
    def test_wrong_password(self, client, alice):
        res = client.post(
            "/api/auth/login", json={"username": "alice", "password": "wrong-pass"}
        )
        assert res.status_code == 401
        assert res.json() == {"message": "Invalid credentials"}

    def test_unknown_user(self, client):
        res = client.post(
            "/api/auth/login", json={"username": "ghost", "password": "secret123"}
        )
        assert res.status_code == 401

    def test_cookie_authenticates_when_no_header(self, client, alice):
        client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
        res = client.get("/api/test/should-be-logged-in")
        assert res.status_code == 200
        assert res.json()["userId"] == alice["id"]

        res = client.post("/api/auth/logout")
        assert res.status_code == 200
        assert res.json() == {"message": "Logout Successful"}
        assert client.get("/api/test/should-be-logged-in").status_code == 401


class TestUsers:
    def test_public_profile(self, client, alice):
        res = client.get(f"/api/users/{alice['id']}")
        assert res.status_code == 200
        assert res.json()["username"] == "alice"
        assert "token" not in res.json()

    def test_unknown_profile(self, client, missing_id):
        assert client.get(f"/api/users/{missing_id}").status_code == 404
        assert client.get("/api/users/garbage").status_code == 404

    def test_update_self(self, client, alice):
        res = client.put(
            f"/api/users/{alice['id']}",
            json={"avatar": "https://img/a.png", "fullName": "Alice A", "password": "newpass1"},
            headers=alice["headers"],
        )
        assert res.status_code == 200
        assert res.json()["avatar"] == "https://img/a.png"
        assert res.json()["fullName"] == "Alice A"

        res = client.post(
            "/api/auth/login", json={"username": "alice", "password": "newpass1"}
        )
        assert res.status_code == 200

    def test_update_other_user_is_forbidden(self, client, alice, bob):
        res = client.put(
            f"/api/users/{bob['id']}", json={"fullName": "Hacked"}, headers=alice["headers"]
        )
        assert res.status_code == 403
        assert res.json() == {"message": "Not authorized to update this user"}

    def test_update_to_taken_username(self, client, alice, bob):
        res = client.put(
            f"/api/users/{alice['id']}", json={"username": "bob"}, headers=alice["headers"]
        )
        assert res.status_code == 400
        assert res.json() == {"message": "Username already taken"}

    def test_update_with_no_fields(self, client, alice):
        res = client.put(f"/api/users/{alice['id']}", json={}, headers=alice["headers"])
        assert res.status_code == 400

    def test_profile_posts_lists_only_own_listings(self, client, alice, bob, make_post):
        make_post(alice, title="Mine")
        make_post(bob, title="Theirs")

        res = client.get("/api/users/profilePosts", headers=alice["headers"])
        assert res.status_code == 200
        assert [p["title"] for p in res.json()] == ["Mine"]
        assert client.get("/api/users/profilePosts").status_code == 401
