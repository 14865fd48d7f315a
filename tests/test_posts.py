import pytest
from fastapi import status


@pytest.fixture
def test_post_data():
    return {
        "title": "Test Post",
        "content": "This is a test post content",
    }


@pytest.fixture
def bob_client(register_and_login):
    return register_and_login({
        "username": "bob",
        "email": "b@example.com",
        "password": "password123",
    })


def category_ids(client, *slugs):
    categories = client.get("/api/categories").json()
    return [c["id"] for c in categories if c["slug"] in slugs]


class TestCategories:
    def test_default_categories(self, client):
        """测试默认分类"""
        response = client.get("/api/categories")
        assert response.status_code == status.HTTP_200_OK
        names = [c["name"] for c in response.json()]
        assert names == sorted(names)
        assert set(names) == {"general", "help", "random", "announcements", "show-and-tell"}


class TestPostCreation:
    def test_create_post(self, authenticated_client, test_post_data):
        """测试创建文章"""
        test_post_data["category_ids"] = category_ids(authenticated_client, "general", "help")
        response = authenticated_client.post("/api/posts", json=test_post_data)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["title"] == test_post_data["title"]
        assert data["author"] == "alice"
        assert data["likes_count"] == 0
        assert data["dislikes_count"] == 0
        assert data["my_reaction"] is None
        assert [c["slug"] for c in data["categories"]] == ["general", "help"]

    def test_create_post_unauthenticated(self, client, test_post_data):
        """测试未登录创建文章"""
        response = client.post("/api/posts", json=test_post_data)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_post_unknown_category(self, authenticated_client, test_post_data):
        test_post_data["category_ids"] = [9999]
        response = authenticated_client.post("/api/posts", json=test_post_data)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_create_post_empty_title(self, authenticated_client, test_post_data):
        test_post_data["title"] = ""
        response = authenticated_client.post("/api/posts", json=test_post_data)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestPostListing:
    def test_get_post(self, client, authenticated_client, test_post_data):
        post = authenticated_client.post("/api/posts", json=test_post_data).json()
        response = client.get(f"/api/posts/{post['id']}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == test_post_data["title"]

    def test_get_missing_post(self, client):
        response = client.get("/api/posts/999")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_newest_first(self, client, authenticated_client):
        for i in range(3):
            authenticated_client.post("/api/posts", json={"title": f"post {i}", "content": "c"})
        titles = [p["title"] for p in client.get("/api/posts").json()]
        assert titles == ["post 2", "post 1", "post 0"]

    def test_limit_and_offset(self, client, authenticated_client):
        for i in range(5):
            authenticated_client.post("/api/posts", json={"title": f"post {i}", "content": "c"})
        titles = [p["title"] for p in client.get("/api/posts", params={"limit": 2, "offset": 1}).json()]
        assert titles == ["post 3", "post 2"]

    def test_filter_by_category(self, client, authenticated_client):
        help_ids = category_ids(authenticated_client, "help")
        authenticated_client.post("/api/posts", json={"title": "needs help", "content": "c", "category_ids": help_ids})
        authenticated_client.post("/api/posts", json={"title": "no category", "content": "c"})

        titles = [p["title"] for p in client.get("/api/posts", params={"category": "help"}).json()]
        assert titles == ["needs help"]

    def test_filter_mine(self, authenticated_client, bob_client):
        authenticated_client.post("/api/posts", json={"title": "alice post", "content": "c"})
        bob_client.post("/api/posts", json={"title": "bob post", "content": "c"})

        titles = [p["title"] for p in bob_client.get("/api/posts", params={"mine": True}).json()]
        assert titles == ["bob post"]

    def test_filter_liked(self, authenticated_client, bob_client):
        liked = authenticated_client.post("/api/posts", json={"title": "liked", "content": "c"}).json()
        disliked = authenticated_client.post("/api/posts", json={"title": "disliked", "content": "c"}).json()
        authenticated_client.post("/api/posts", json={"title": "ignored", "content": "c"})
        bob_client.post(f"/api/reactions/post/{liked['id']}", json={"value": 1})
        bob_client.post(f"/api/reactions/post/{disliked['id']}", json={"value": -1})

        posts = bob_client.get("/api/posts", params={"liked": True}).json()
        assert [p["title"] for p in posts] == ["liked"]
        assert posts[0]["my_reaction"] == 1

    def test_anonymous_filters_ignored(self, client, authenticated_client):
        """匿名用户的 mine/liked 过滤被忽略"""
        authenticated_client.post("/api/posts", json={"title": "a", "content": "c"})
        authenticated_client.post("/api/posts", json={"title": "b", "content": "c"})
        posts = client.get("/api/posts", params={"mine": True, "liked": True}).json()
        assert len(posts) == 2
        assert all(p["my_reaction"] is None for p in posts)

    def test_counts_reflect_all_users(self, client, authenticated_client, bob_client):
        post = authenticated_client.post("/api/posts", json={"title": "t", "content": "c"}).json()
        authenticated_client.post(f"/api/reactions/post/{post['id']}", json={"value": 1})
        bob_client.post(f"/api/reactions/post/{post['id']}", json={"value": -1})

        listed = client.get("/api/posts").json()[0]
        assert (listed["likes_count"], listed["dislikes_count"]) == (1, 1)
