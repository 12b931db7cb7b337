import json
import unittest
from unittest.mock import MagicMock

from greeter.errors import SchemaSetupError, StorageError
from greeter.router import CORS_HEADERS, HttpRequest, handle, match_route
from greeter.store import InMemorySettingsStore


class RouterTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemorySettingsStore()

    def _handle(self, method, path, body=None):
        return handle(HttpRequest(method=method, path=path, body=body), self.store)

    def test_greeting_uses_default_suffix(self):
        response = self._handle("GET", "/api/greeting")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(json.loads(response.body), {"message": "Hello, World!"})

    def test_update_then_greeting(self):
        response = self._handle("POST", "/api/name", json.dumps({"name": "Ada"}))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            json.loads(response.body),
            {"status": "success", "message": "Name suffix updated to Ada."},
        )
        greeting = self._handle("GET", "/api/greeting")
        self.assertEqual(json.loads(greeting.body), {"message": "Hello, Ada!"})

    def test_accepts_bytes_body(self):
        response = self._handle("POST", "/api/name", b'{"name": "Bytes"}')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.store.get_suffix(), "Bytes")

    def test_invalid_bodies_are_rejected_before_the_store(self):
        cases = {
            "not json": "Invalid input. Request body must be valid JSON.",
            "": "Invalid input. Request body must be valid JSON.",
            None: "Invalid input. Request body must be valid JSON.",
            "{}": "Invalid input. 'name' field is required and must be a string.",
            '{"name": 123}': "Invalid input. 'name' field is required and must be a string.",
            '{"name": ""}': "Invalid input. 'name' field is required and must be a string.",
            '"not json"': "Invalid input. 'name' field is required and must be a string.",
            "null": "Invalid input. 'name' field is required and must be a string.",
        }
        for body, message in cases.items():
            with self.subTest(body=body):
                response = self._handle("POST", "/api/name", body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(
                    json.loads(response.body), {"status": "error", "message": message}
                )
                self.assertEqual(self.store.get_suffix(), "World")

    def test_unknown_route_is_not_found(self):
        for method, path in [
            ("GET", "/api/unknown"),
            ("POST", "/api/greeting"),
            ("GET", "/api/name"),
            ("DELETE", "/api/name"),
        ]:
            with self.subTest(method=method, path=path):
                response = self._handle(method, path)
                self.assertEqual(response.status_code, 404)
                self.assertEqual(json.loads(response.body), {"error": "Not Found"})

    def test_options_returns_empty_no_content(self):
        response = self._handle("OPTIONS", "/anything/at/all")
        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.body, "")
        self.assertEqual(response.headers, CORS_HEADERS)

    def test_every_response_carries_cors_headers(self):
        responses = [
            self._handle("GET", "/api/greeting"),
            self._handle("POST", "/api/name", "{}"),
            self._handle("GET", "/missing"),
            self._handle("OPTIONS", "/api/name"),
        ]
        for response in responses:
            with self.subTest(status=response.status_code):
                self.assertEqual(response.headers, CORS_HEADERS)

    def test_matches_on_path_suffix(self):
        response = self._handle(
            "GET", "/.netlify/functions/greeter/api/greeting/?cache=1"
        )
        self.assertEqual(response.status_code, 200)

    def test_custom_api_prefix(self):
        self.assertIsNotNone(match_route("/v2/greeting", "GET", "/v2/"))
        self.assertIsNone(match_route("/api/greeting", "GET", "/v2"))

    def test_initialize_failure_short_circuits(self):
        store = MagicMock()
        store.initialize.side_effect = SchemaSetupError("Failed to create settings table.")
        response = handle(HttpRequest(method="OPTIONS", path="/api/name"), store)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            json.loads(response.body), {"error": "Failed to create settings table."}
        )
        self.assertEqual(response.headers, CORS_HEADERS)
        store.get_suffix.assert_not_called()

    def test_store_error_keeps_attached_status_and_body(self):
        store = MagicMock()
        store.get_suffix.side_effect = StorageError("Failed to retrieve greeting.")
        response = handle(HttpRequest(method="GET", path="/api/greeting"), store)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            json.loads(response.body), {"error": "Failed to retrieve greeting."}
        )
        self.assertEqual(response.headers, CORS_HEADERS)

    def test_missing_row_on_update_is_server_error(self):
        self.store.initialize()
        self.store.reset()
        store = MagicMock(wraps=self.store)
        store.initialize.return_value = None
        response = handle(
            HttpRequest(method="POST", path="/api/name", body='{"name": "Ada"}'), store
        )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            json.loads(response.body),
            {"status": "error", "message": "Name suffix key not found for update."},
        )

    def test_event_response_shape(self):
        response = self._handle("GET", "/api/greeting")
        event = response.as_event_response()
        self.assertEqual(event["statusCode"], 200)
        self.assertEqual(event["headers"], CORS_HEADERS)
        self.assertEqual(json.loads(event["body"]), {"message": "Hello, World!"})


if __name__ == "__main__":
    unittest.main()
