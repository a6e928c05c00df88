import json
import unittest
from unittest.mock import Mock

import requests

from gdindex.cache.cloudflare import CloudflareKVStore
from gdindex.errors import CacheError

BASE = "https://api.cloudflare.com/client/v4/accounts/ACC/storage/kv/namespaces/NS"


def _response(status_code: int = 200, text: str = "", payload=None) -> Mock:
    resp = Mock()
    resp.status_code = status_code
    resp.text = text
    resp.json.return_value = payload
    return resp


class TestCloudflareKVStore(unittest.TestCase):
    def setUp(self) -> None:
        self.session = Mock()
        self.session.headers = {}
        self.store = CloudflareKVStore("ACC", "NS", "TOKEN", session=self.session, timeout=5)

    def test_sets_bearer_token(self) -> None:
        self.assertEqual(self.session.headers["Authorization"], "Bearer TOKEN")

    def test_get_decodes_json_and_quotes_key(self) -> None:
        self.session.request.return_value = _response(text=json.dumps({"a": 1}))

        value = self.store.get("file:0:/a b/c.txt")

        self.assertEqual(value, {"a": 1})
        method, url = self.session.request.call_args.args
        self.assertEqual(method, "GET")
        self.assertEqual(url, f"{BASE}/values/file%3A0%3A%2Fa%20b%2Fc.txt")
        self.assertEqual(self.session.request.call_args.kwargs["timeout"], 5)

    def test_get_missing_and_plain_text(self) -> None:
        self.session.request.return_value = _response(status_code=404, text="not found")
        self.assertIsNone(self.store.get("k"))

        self.session.request.return_value = _response(text="3")
        self.assertEqual(self.store.get("k"), 3)

        self.session.request.return_value = _response(text="plain")
        self.assertEqual(self.store.get("k"), "plain")

    def test_put_sends_ttl_and_json_body(self) -> None:
        self.session.request.return_value = _response()

        self.store.put("k", {"x": [1]}, 120)

        kwargs = self.session.request.call_args.kwargs
        self.assertEqual(self.session.request.call_args.args[0], "PUT")
        self.assertEqual(kwargs["params"], {"expiration_ttl": "120"})
        self.assertEqual(json.loads(kwargs["data"].decode("utf-8")), {"x": [1]})

    def test_put_without_ttl(self) -> None:
        self.session.request.return_value = _response()
        self.store.put("cursor", "1")
        self.assertIsNone(self.session.request.call_args.kwargs["params"])

    def test_list_parses_keys_and_cursor(self) -> None:
        self.session.request.return_value = _response(
            payload={
                "result": [{"name": "file:0:/a"}, {"name": "file:0:/b"}],
                "result_info": {"cursor": "NEXT"},
            }
        )

        page = self.store.list("file:0:")

        self.assertEqual(page.keys, ["file:0:/a", "file:0:/b"])
        self.assertEqual(page.cursor, "NEXT")
        self.assertFalse(page.list_complete)
        self.assertEqual(self.session.request.call_args.args[1], f"{BASE}/keys")
        self.assertEqual(self.session.request.call_args.kwargs["params"]["prefix"], "file:0:")

        self.session.request.return_value = _response(payload={"result": [], "result_info": {"cursor": ""}})
        self.assertTrue(self.store.list("x", cursor="NEXT").list_complete)

    def test_delete_tolerates_missing_key(self) -> None:
        self.session.request.return_value = _response(status_code=404)
        self.store.delete("gone")
        self.assertEqual(self.session.request.call_args.args[0], "DELETE")

    def test_http_failure_raises_cache_error(self) -> None:
        self.session.request.return_value = _response(status_code=500, text="oops")

        with self.assertRaises(CacheError) as ctx:
            self.store.put("k", 1, 60)
        self.assertEqual(ctx.exception.details["status_code"], 500)

    def test_transport_failure_raises_cache_error(self) -> None:
        self.session.request.side_effect = requests.ConnectionError("down")

        with self.assertRaises(CacheError) as ctx:
            self.store.get("k")
        self.assertIsInstance(ctx.exception.cause, requests.ConnectionError)


if __name__ == "__main__":
    unittest.main()
