import base64
import hashlib
import json
import re
import unittest
from unittest.mock import MagicMock

import httpx
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ociproxy.errors import ValidationError
from ociproxy.objects.credentials import OCICredentials
from ociproxy.objects.proxy_result import OutboundCall
from ociproxy.processor.forwarder import RequestForwarder

HOST = "document.ap-singapore-1.oraclecloud.com"

OCR_RESPONSE = {
    "pages": [{
        "pageNumber": 1,
        "words": [
            {"text": "B", "boundingPolygon": {"normalizedVertices": [{"x": 0.5, "y": 0.10}]}},
            {"text": "A", "boundingPolygon": {"normalizedVertices": [{"x": 0.1, "y": 0.10}]}},
            {"text": "C", "boundingPolygon": {"normalizedVertices": [{"x": 0.2, "y": 0.50}]}},
        ],
    }]
}


class TestRequestForwarder(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        cls.credentials = OCICredentials(
            tenancy_ocid="ocid1.tenancy.oc1..aaa",
            user_ocid="ocid1.user.oc1..bbb",
            fingerprint="aa:bb:cc",
            private_key=cls.private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.TraditionalOpenSSL,
                encryption_algorithm=serialization.NoEncryption(),
            ).decode("utf-8"),
        )

    def setUp(self):
        self.requests = []
        self.response = httpx.Response(200, json=OCR_RESPONSE)

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.response

        self.client = httpx.Client(transport=httpx.MockTransport(handler))
        self.forwarder = RequestForwarder(credentials=self.credentials, client=self.client)

    def tearDown(self):
        self.client.close()

    def test_sends_signed_body_verbatim(self):
        body = {"features": [{"featureType": "TEXT_EXTRACTION"}], "document": {"source": "INLINE", "data": "QUJD"}}
        self.forwarder.forward(OutboundCall(method="POST", path="/20221109/actions/analyzeDocument", host=HOST, body=body))

        sent = self.requests[0]
        self.assertEqual(str(sent.url), f"https://{HOST}/20221109/actions/analyzeDocument")
        self.assertEqual(sent.method, "POST")
        digest = base64.b64encode(hashlib.sha256(sent.content).digest()).decode("ascii")
        self.assertEqual(sent.headers["x-content-sha256"], digest)
        self.assertEqual(json.loads(sent.content), body)

    def test_signature_verifies_against_sent_headers(self):
        self.forwarder.forward(OutboundCall(method="PUT", path="/n/ns/b/bucket/o/file", host=HOST, body={"k": "v"}))
        sent = self.requests[0]

        auth = dict(re.findall(r'(\w+)="([^"]*)"', sent.headers["Authorization"]))
        names = auth["headers"].split(" ")
        lines = []
        for name in names:
            if name == "(request-target)":
                lines.append(f"(request-target): {sent.method.lower()} {sent.url.raw_path.decode('ascii')}")
            else:
                lines.append(f"{name}: {sent.headers[name]}")

        self.private_key.public_key().verify(
            base64.b64decode(auth["signature"]), "\n".join(lines).encode("utf-8"), padding.PKCS1v15(), hashes.SHA256()
        )
        self.assertEqual(auth["keyId"], self.credentials.key_id)

    def test_get_sends_no_body(self):
        result = self.forwarder.forward(OutboundCall(method="GET", path="/n/ns/b", host=HOST, body={"x": 1}))

        self.assertEqual(self.requests[0].content, b"")
        self.assertNotIn("x-content-sha256", self.requests[0].headers)
        self.assertEqual(result.status, 200)
        self.assertEqual(result.status_text, "OK")

    def test_extract_text_when_requested(self):
        result = self.forwarder.forward(OutboundCall(
            method="POST", path="/20221109/actions/analyzeDocument", host=HOST, body={"a": 1}, extract_text=True
        ))

        self.assertEqual(result.data, OCR_RESPONSE)
        self.assertEqual(result.raw_text, "A B\nC")

    def test_no_text_extraction_without_flag(self):
        result = self.forwarder.forward(OutboundCall(method="POST", path="/x", host=HOST, body={"a": 1}))
        self.assertIsNone(result.raw_text)

    def test_no_text_extraction_without_pages(self):
        self.response = httpx.Response(200, json={"pages": []})
        result = self.forwarder.forward(OutboundCall(method="POST", path="/x", host=HOST, body={"a": 1}, extract_text=True))
        self.assertIsNone(result.raw_text)

    def test_non_json_response_returned_as_text(self):
        self.response = httpx.Response(404, text="Not Found", headers={"content-type": "text/plain"})
        result = self.forwarder.forward(OutboundCall(method="GET", path="/missing", host=HOST, extract_text=True))

        self.assertEqual(result.status, 404)
        self.assertEqual(result.data, "Not Found")
        self.assertIsNone(result.raw_text)

    def test_signing_error_aborts_call(self):
        with self.assertRaises(ValidationError):
            self.forwarder.forward(OutboundCall(method="POST", path="", host=HOST))
        self.assertEqual(self.requests, [])

    def test_uses_injected_collaborators(self):
        signer = MagicMock()
        signer.build.return_value = MagicMock(headers={"Authorization": "Signature x"}, body=None)
        forwarder = RequestForwarder(credentials=self.credentials, client=self.client, signer=signer)

        forwarder.forward(OutboundCall(method="GET", path="/n", host=HOST))

        signing_request = signer.build.call_args[0][0]
        self.assertEqual(signing_request.key_id, self.credentials.key_id)
        self.assertEqual(signing_request.host, HOST)


if __name__ == '__main__':
    unittest.main()
