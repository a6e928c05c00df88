import unittest

from gdindex.auth import AuthInfo


class TestAuthInfo(unittest.TestCase):
    def test_auth_info_valid_refresh_token(self) -> None:
        info = AuthInfo(
            kind="refresh_token",
            data={"client_id": "cid", "client_secret": "secret", "refresh_token": "rt"},
        )
        self.assertEqual(info.client_id, "cid")
        self.assertEqual(info.client_secret, "secret")
        self.assertEqual(info.refresh_token, "rt")

    def test_auth_info_valid_oauth(self) -> None:
        info = AuthInfo(
            kind="oauth",
            data={
                "client_secrets_file": "/tmp/client_secrets.json",
                "token_file": "/tmp/token.json",
            },
        )
        self.assertEqual(info.kind, "oauth")
        self.assertEqual(info.token_file, "/tmp/token.json")

    def test_auth_info_invalid_kind(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="service_account", data={})

    def test_auth_info_missing_keys(self) -> None:
        with self.assertRaises(ValueError):
            AuthInfo(kind="oauth", data={"client_secrets_file": "x"})
        with self.assertRaises(ValueError):
            AuthInfo(kind="refresh_token", data={"client_id": "c", "client_secret": "s", "refresh_token": " "})

    def test_auth_info_data_must_be_dict(self) -> None:
        with self.assertRaises(TypeError):
            AuthInfo(kind="oauth", data=[])  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
