from conftest import VALID_TOKEN, make_client, make_settings, rpc


class TestJsonRpcRoute:
    def test_success(self, client):
        response = client.post("/rpc", json=rpc("list_endpoints"))
        assert response.status_code == 200
        body = response.json()
        assert body["jsonrpc"] == "2.0"
        assert body["id"] == 1
        assert body["result"]["total"] == 6

    def test_invalid_json(self, client):
        response = client.post(
            "/rpc", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == -32700

    def test_invalid_envelope(self, client):
        response = client.post("/rpc", json={"method": "initialize"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == -32600

    def test_unknown_method(self, client):
        response = client.post("/rpc", json=rpc("unknown_method"))
        assert response.status_code == 404
        assert response.json()["error"]["code"] == -32601

    def test_get_is_not_allowed(self, client):
        assert client.get("/rpc").status_code == 405

    def test_custom_route(self):
        client = make_client(make_settings(mcp_auth_driver="none", mcp_rpc_route="api/docs/"))
        assert client.post("/api/docs", json=rpc("initialize")).status_code == 200

    def test_disabled_endpoint(self):
        client = make_client(make_settings(mcp_enabled=False))
        response = client.post("/rpc", json=rpc("initialize"))
        assert response.status_code == 404

    def test_healthcheck(self):
        client = make_client(make_settings())
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAuthentication:
    def test_valid_token(self):
        client = make_client(make_settings())
        response = client.post(
            "/rpc", json=rpc("initialize"), headers={"Authorization": f"Bearer {VALID_TOKEN}"}
        )
        assert response.status_code == 200

    def test_second_token(self):
        client = make_client(make_settings())
        response = client.post(
            "/rpc", json=rpc("initialize"), headers={"Authorization": "Bearer test-qa-token"}
        )
        assert response.status_code == 200

    def test_missing_header(self):
        client = make_client(make_settings())
        response = client.post("/rpc", json=rpc("initialize"))
        assert response.status_code == 401
        assert response.json()["error"]["code"] == -32001

    def test_invalid_token(self):
        client = make_client(make_settings())
        response = client.post(
            "/rpc", json=rpc("initialize"), headers={"Authorization": "Bearer invalid-token"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == -32001

    def test_malformed_header(self):
        client = make_client(make_settings())
        response = client.post(
            "/rpc", json=rpc("initialize"), headers={"Authorization": "InvalidFormat token"}
        )
        assert response.status_code == 401

    def test_driver_none(self):
        client = make_client(make_settings(mcp_auth_driver="none", mcp_auth_tokens=None))
        assert client.post("/rpc", json=rpc("initialize")).status_code == 200

    def test_invalid_driver(self):
        client = make_client(make_settings(mcp_auth_driver="invalid-driver"))
        response = client.post("/rpc", json=rpc("initialize"))
        assert response.status_code == 500
        assert response.json()["error"]["code"] == -32600

    def test_no_tokens_configured(self):
        client = make_client(make_settings(mcp_auth_tokens=" , "))
        response = client.post(
            "/rpc", json=rpc("initialize"), headers={"Authorization": "Bearer any-token"}
        )
        assert response.status_code == 500
        assert response.json()["error"]["code"] == -32600

    def test_healthcheck_skips_auth(self):
        client = make_client(make_settings())
        assert client.get("/health").status_code == 200
