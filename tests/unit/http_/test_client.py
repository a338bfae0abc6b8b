import pytest
import requests

from customresource import config
from customresource.http import SimpleRequestsClient, create_request


class TestSimpleRequestsClient:
    def test_request(self, httpserver):
        httpserver.expect_request("/response", method="PUT").respond_with_data(
            "OK", status=200, headers={"X-Amz-Request-Id": "1234"}
        )

        with SimpleRequestsClient() as client:
            response = client.request(
                create_request(
                    "PUT",
                    httpserver.url_for("/response"),
                    headers={"Content-Type": "application/json"},
                    body=b'{"Status": "SUCCESS"}',
                ),
                timeout=5,
            )

        assert response.status_code == 200
        assert response.get_data() == b"OK"
        assert response.headers["X-Amz-Request-Id"] == "1234"

        request, _ = httpserver.log[0]
        assert request.get_data() == b'{"Status": "SUCCESS"}'
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept-Encoding"] == "identity"

    def test_query_string_is_sent_unchanged(self, httpserver):
        httpserver.expect_request("/response", method="PUT").respond_with_data("", status=204)

        client = SimpleRequestsClient()
        response = client.request(
            create_request("PUT", httpserver.url_for("/response") + "?token=a%2Fb&sig=c%2Bd%3D")
        )

        assert response.status_code == 204
        request, _ = httpserver.log[0]
        assert request.query_string == b"token=a%2Fb&sig=c%2Bd%3D"

    def test_redirects_are_not_followed(self, httpserver):
        httpserver.expect_request("/response", method="PUT").respond_with_data(
            "", status=307, headers={"Location": "/elsewhere"}
        )

        response = SimpleRequestsClient().request(
            create_request("PUT", httpserver.url_for("/response"))
        )

        assert response.status_code == 307
        assert len(httpserver.log) == 1

    def test_connection_refused(self, closed_port):
        client = SimpleRequestsClient()
        with pytest.raises(requests.ConnectionError):
            client.request(create_request("PUT", f"http://127.0.0.1:{closed_port}/"), timeout=1)

    @pytest.mark.parametrize("verify", [True, False])
    def test_verify_follows_config(self, monkeypatch, verify):
        monkeypatch.setattr(config, "CALLBACK_TLS_VERIFY", verify)
        assert SimpleRequestsClient().session.verify is verify

    def test_given_session_is_not_changed(self):
        session = requests.Session()
        session.verify = "/etc/ssl/certs/ca.pem"

        assert SimpleRequestsClient(session).session.verify == "/etc/ssl/certs/ca.pem"
