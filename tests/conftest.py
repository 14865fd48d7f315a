import os

# 设置测试环境（必须在导入应用之前）
os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from forum.main import app
from forum.db.database import create_db_engine, create_tables, get_session, get_session_maker
from forum.api.endpoints.categories import seed_default_categories


@pytest.fixture
def test_engine(tmp_path):
    """每个测试使用独立的 SQLite 数据库"""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}", timeout=5)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    maker = get_session_maker(test_engine)
    with maker() as session:
        seed_default_categories(session)
    return maker


@pytest.fixture
def db_session(session_maker):
    """服务层测试使用的数据库会话"""
    session = session_maker()
    yield session
    session.close()


@pytest.fixture
def client(session_maker):
    """创建测试客户端"""
    # 覆盖依赖
    def override_get_session():
        session = session_maker()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user_data():
    """测试用户数据"""
    return {
        "username": "alice",
        "email": "a@example.com",
        "password": "pw123456",
    }


@pytest.fixture
def register_and_login(client):
    """注册并登录一个用户，返回已认证的客户端"""
    def _register_and_login(user_data):
        auth_client = TestClient(app)
        auth_client.post("/api/users/register", json=user_data)
        response = auth_client.post("/api/users/login", json={
            "email": user_data["email"],
            "password": user_data["password"],
        })
        assert response.status_code == 200
        return auth_client
    return _register_and_login


@pytest.fixture
def authenticated_client(client, register_and_login, test_user_data):
    """返回一个已认证的客户端"""
    return register_and_login(test_user_data)
