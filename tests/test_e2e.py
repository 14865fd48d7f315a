from fastapi import status


class TestEndToEnd:
    def test_complete_flow(self, client, register_and_login):
        """
        测试完整的端到端流程：
        1. alice 和 bob 注册并登录
        2. alice 发表文章，bob 评论
        3. bob 对文章和评论做出反应
        4. alice 再次登录，旧会话失效
        5. bob 登出后不能再做出反应
        """
        alice = register_and_login({"username": "alice", "email": "a@example.com", "password": "pw123456"})
        bob = register_and_login({"username": "bob", "email": "b@example.com", "password": "pw123456"})

        general = [c["id"] for c in client.get("/api/categories").json() if c["slug"] == "general"]
        post = alice.post("/api/posts", json={"title": "Hello", "content": "World", "category_ids": general}).json()
        comment = bob.post(f"/api/posts/{post['id']}/comments", json={"body": "Welcome!"}).json()

        # bob: like, like again (cancel), dislike, like (flip)
        expected = [
            ("created", 1, 0),
            ("removed", 0, 0),
            ("created", 0, 1),
            ("updated", 1, 0),
        ]
        for value, (result, likes, dislikes) in zip([1, 1, -1, 1], expected):
            data = bob.post(f"/api/reactions/post/{post['id']}", json={"value": value}).json()
            assert (data["result"], data["likes_count"], data["dislikes_count"]) == (result, likes, dislikes)

        alice.post(f"/api/reactions/comment/{comment['id']}", json={"value": 1})
        comments = client.get(f"/api/posts/{post['id']}/comments").json()
        assert comments[0]["likes_count"] == 1

        # alice logs in from somewhere else; the first session is gone
        other_alice = register_and_login({"username": "alice", "email": "a@example.com", "password": "pw123456"})
        assert alice.get("/api/users/me").status_code == status.HTTP_401_UNAUTHORIZED
        assert other_alice.get("/api/users/me").json()["username"] == "alice"

        # bob logs out
        bob.post("/api/users/logout")
        response = bob.post(f"/api/reactions/post/{post['id']}", json={"value": 1})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

        listed = client.get("/api/posts", params={"category": "general"}).json()
        assert [(p["title"], p["likes_count"], p["dislikes_count"]) for p in listed] == [("Hello", 1, 0)]
