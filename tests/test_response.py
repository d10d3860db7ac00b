from __future__ import annotations

import unittest

import support  # noqa: F401

from freenas_checks.http import HttpResponse
from freenas_checks.response import expect_shape, parse_response
from freenas_checks.schemas import registry
from freenas_checks.status import CheckError, Status


def _response(status: int, body: bytes) -> HttpResponse:
    return HttpResponse(status_code=status, body=body, url="http://nas.example/api")


class TestParseResponse(unittest.TestCase):
    def test_success_returns_decoded_json(self) -> None:
        self.assertEqual(parse_response(_response(200, b'[{"a": 1}]')), [{"a": 1}])
        self.assertEqual(parse_response(_response(204, b"{}")), {})

    def test_non_2xx_is_critical_regardless_of_body(self) -> None:
        for status in (301, 400, 401, 404, 500, 503):
            for body in (b"[]", b"not json", b""):
                with self.subTest(status=status, body=body):
                    with self.assertRaises(CheckError) as ctx:
                        parse_response(_response(status, body))
                    self.assertEqual(ctx.exception.status, Status.CRITICAL)
                    self.assertEqual(ctx.exception.message, str(status))

    def test_whole_response_includes_body(self) -> None:
        with self.assertRaises(CheckError) as ctx:
            parse_response(_response(401, b"Unauthorized"), whole_response=True)
        self.assertEqual(ctx.exception.message, "http code: 401: body: Unauthorized")

    def test_invalid_json_is_critical(self) -> None:
        for body in (b"", b"<html>", b"[1, 2", b"\xff\xfe"):
            with self.subTest(body=body):
                with self.assertRaises(CheckError) as ctx:
                    parse_response(_response(200, body))
                self.assertEqual(ctx.exception.status, Status.CRITICAL)
                self.assertEqual(ctx.exception.message, "invalid JSON from request")


class TestExpectShape(unittest.TestCase):
    def test_valid_volume_list_passes(self) -> None:
        payload = [{"vol_name": "tank", "status": "HEALTHY", "used_pct": "12%", "extra": 1}]
        self.assertIs(expect_shape(payload, schema_name="volumes"), payload)

    def test_object_instead_of_array(self) -> None:
        with self.assertRaises(CheckError) as ctx:
            expect_shape({"vol_name": "tank"}, schema_name="volumes")
        self.assertEqual(ctx.exception.status, Status.CRITICAL)
        self.assertTrue(ctx.exception.message.startswith("unexpected JSON shape: $: "))

    def test_error_path_points_at_field(self) -> None:
        payload = [
            {"vol_name": "tank", "status": "HEALTHY", "used_pct": "12%"},
            {"vol_name": "backup", "status": "HEALTHY", "used_pct": 40},
        ]
        with self.assertRaises(CheckError) as ctx:
            expect_shape(payload, schema_name="volumes")
        self.assertTrue(ctx.exception.message.startswith("unexpected JSON shape: $[1].used_pct: "))

    def test_service_enable_must_be_boolean(self) -> None:
        errors = registry.validate([{"srv_service": "ssh", "srv_enable": "true"}], schema_name="services")
        self.assertEqual(len(errors), 1)
        self.assertTrue(errors[0].startswith("$[0].srv_enable: "))

    def test_unknown_schema(self) -> None:
        with self.assertRaises(KeyError):
            registry.load_schema("disks")


if __name__ == "__main__":
    unittest.main()
