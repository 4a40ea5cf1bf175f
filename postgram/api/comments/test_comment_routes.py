# postgram/api/comments/test_comment_routes.py
"""
댓글 API 테스트

사용법: python -m pytest postgram/api/comments/test_comment_routes.py -v
"""


class TestCreateComment:
    """POST /api/posts/<post_id>/comments"""

    def test_comment_is_created_and_appended_to_post(self, client, make_user, auth_headers, create_post_via_api, fake_db):
        make_user("alice")
        make_user("bob", username="Bob")
        post = create_post_via_api("alice")

        response = client.post(f"/api/posts/{post['post_id']}/comments", json={"text": "멋진 사진!"}, headers=auth_headers("bob"))
        assert response.status_code == 201
        body = response.get_json()
        assert body["success"] is True

        comment = body["comment"]
        assert comment["text"] == "멋진 사진!"
        assert comment["post_id"] == post["post_id"]
        assert comment["author"] == {
            "user_id": "bob",
            "username": "Bob",
            "profile_picture": "https://cdn.example.com/avatars/bob.png",
        }
        assert fake_db.docs('posts')[post['post_id']]["comments"] == [comment["comment_id"]]

    def test_comment_ids_keep_insertion_order(self, client, make_user, auth_headers, create_post_via_api, fake_db):
        make_user("alice")
        post = create_post_via_api("alice")
        ids = []
        for text in ("one", "two", "three"):
            response = client.post(f"/api/posts/{post['post_id']}/comments", json={"text": text}, headers=auth_headers("alice"))
            ids.append(response.get_json()["comment"]["comment_id"])
        assert fake_db.docs('posts')[post['post_id']]["comments"] == ids

    def test_missing_or_empty_text_is_rejected(self, client, make_user, auth_headers, create_post_via_api, fake_db):
        make_user("alice")
        post = create_post_via_api("alice")
        url = f"/api/posts/{post['post_id']}/comments"

        for payload in ({}, {"text": ""}, {"text": "   "}):
            response = client.post(url, json=payload, headers=auth_headers("alice"))
            assert response.status_code == 400, payload
            assert response.get_json()["error_code"] == "VALIDATION_ERROR"

        assert fake_db.docs('comments') == {}

    def test_long_text_is_accepted(self, client, make_user, auth_headers, create_post_via_api):
        make_user("alice")
        post = create_post_via_api("alice")
        text = "a" * 5000
        response = client.post(f"/api/posts/{post['post_id']}/comments", json={"text": text}, headers=auth_headers("alice"))
        assert response.status_code == 201
        assert response.get_json()["comment"]["text"] == text

    def test_comment_on_missing_post_creates_nothing(self, client, make_user, auth_headers, fake_db):
        make_user("alice")
        response = client.post("/api/posts/missing/comments", json={"text": "hello?"}, headers=auth_headers("alice"))
        assert response.status_code == 404
        assert fake_db.docs('comments') == {}

    def test_requires_token(self, client):
        response = client.post("/api/posts/any/comments", json={"text": "hi"})
        assert response.status_code == 401


class TestListComments:
    """GET /api/posts/<post_id>/comments"""

    def test_no_comments_returns_empty_list(self, client):
        response = client.get("/api/posts/unknown/comments")
        assert response.status_code == 200
        assert response.get_json() == {"success": True, "comments": []}

    def test_comments_are_newest_first_with_authors(self, client, make_user, auth_headers, create_post_via_api):
        make_user("alice", username="Alice")
        make_user("bob", username="Bob")
        post = create_post_via_api("alice")
        other = create_post_via_api("alice")
        url = f"/api/posts/{post['post_id']}/comments"

        client.post(url, json={"text": "first"}, headers=auth_headers("alice"))
        client.post(url, json={"text": "second"}, headers=auth_headers("bob"))
        client.post(f"/api/posts/{other['post_id']}/comments", json={"text": "elsewhere"}, headers=auth_headers("bob"))

        comments = client.get(url).get_json()["comments"]
        assert [c["text"] for c in comments] == ["second", "first"]
        assert [c["author"]["username"] for c in comments] == ["Bob", "Alice"]
