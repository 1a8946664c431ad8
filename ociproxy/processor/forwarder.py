import logging
from typing import Any, Optional

import httpx

from ociproxy.loader.ocr_loader import OCRDocumentReader
from ociproxy.objects.credentials import OCICredentials
from ociproxy.objects.proxy_result import OutboundCall, ProxyResult
from ociproxy.objects.signing_request import SigningRequest
from ociproxy.processor.line_reconstructor import LineReconstructor
from ociproxy.processor.signer import SignatureBuilder

logger = logging.getLogger(__name__)


class RequestForwarder:
    """
    Signs outbound calls, sends them to OCI and post-processes OCR responses.

    Attributes:
        credentials (OCICredentials): Key identity and private key used for every call.
        client (httpx.Client): Transport used to send signed requests.
        signer (SignatureBuilder): Builds the signature headers.
        reconstructor (LineReconstructor): Rebuilds text lines from OCR word data.
    """

    def __init__(self,
                 credentials: OCICredentials,
                 client: httpx.Client,
                 signer: Optional[SignatureBuilder] = None,
                 reconstructor: Optional[LineReconstructor] = None):
        self.credentials = credentials
        self.client = client
        self.signer = signer or SignatureBuilder()
        self.reconstructor = reconstructor or LineReconstructor()

    def forward(self, call: OutboundCall) -> ProxyResult:
        """
        Sign and send a call, then decode the response.

        The body sent is exactly the byte string that was digested, so the server-side
        digest check sees the same content the signature covers.

        Args:
            call (OutboundCall): What to send and whether OCR text should be extracted.

        Returns:
            ProxyResult: Upstream status, decoded payload and, if requested, reconstructed text.

        Raises:
            SigningError: If the request cannot be signed; nothing is sent in that case.
            httpx.HTTPError: If the transport fails.
        """
        signed = self.signer.build(SigningRequest(
            method=call.method,
            path=call.path,
            host=call.host,
            key_id=self.credentials.key_id,
            private_key=self.credentials.private_key,
            passphrase=self.credentials.passphrase,
            body=call.body,
        ))

        url = f"https://{call.host}{call.path}"
        logger.info(f"Fetching: {call.method} {url}")
        response = self.client.request(call.method, url, headers=signed.headers, content=signed.body)
        logger.info(f"Upstream responded {response.status_code} {response.reason_phrase} for {url}")

        data = self._decode(response)
        raw_text = None
        if call.extract_text:
            reader = OCRDocumentReader(data)
            if reader.has_pages():
                raw_text = self.reconstructor.reconstruct(reader.get_document())

        return ProxyResult(
            status=response.status_code,
            status_text=response.reason_phrase,
            data=data,
            raw_text=raw_text,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if "application/json" in response.headers.get("content-type", ""):
            return response.json()
        return response.text
