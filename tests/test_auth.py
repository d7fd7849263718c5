import httpx

from pizzabox.client import AdminAuth, create_api_client


def test_token_roundtrip(storage, location):
    auth = AdminAuth(storage, location)
    assert not auth.is_authenticated()

    auth.set_token("tok_abc")
    assert auth.get_token() == "tok_abc"
    assert auth.is_authenticated()


def test_clear_removes_auth_entries_only(storage, location):
    storage.set_item("admin_token", "tok_abc")
    storage.set_item("admin_user", '{"id": "a1"}')
    storage.set_item("admin_preferences", "{}")
    storage.set_item("auth_refresh", "r1")
    storage.set_item("the-pizza-box-storage", '{"state": {}, "version": 0}')

    AdminAuth(storage, location).clear()

    assert storage.keys() == ["the-pizza-box-storage"]


def test_force_redirect_clears_and_navigates(storage, location):
    auth = AdminAuth(storage, location)
    auth.set_token("tok_abc")

    auth.force_redirect_to_login()

    assert not auth.is_authenticated()
    assert location.pathname == "/login"


def test_logout_notifies_backend_without_token(storage, location):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"message": "Logged out"})

    auth = AdminAuth(storage, location)
    auth.set_token("tok_abc")

    with create_api_client(storage, location, api_url="http://testserver/api",
                           transport=httpx.MockTransport(handler)) as api:
        auth.logout(api)

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/admin/auth/logout"
    # Token is cleared before the call goes out
    assert "Authorization" not in seen[0].headers
    assert location.pathname == "/login"


def test_logout_succeeds_when_backend_unreachable(storage, location, caplog):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    auth = AdminAuth(storage, location)
    auth.set_token("tok_abc")

    with create_api_client(storage, location, api_url="http://testserver/api",
                           transport=httpx.MockTransport(handler)) as api:
        auth.logout(api)

    assert not auth.is_authenticated()
    assert location.pathname == "/login"
    assert "Backend logout failed" in caplog.text
