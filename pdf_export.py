"""
HTML to PDF exporter.

Posts report HTML to a configurable PDF rendering service.
Default endpoint: PDF_SERVICE_URL (http://localhost:8001/pdf/convert)
Expected payload (POST JSON):
{
  "html": "<html>...</html>",
  "format": "A4",
  "print_background": true,
  "color_scheme": "dark"
}
Response: {"pdf_base64": "..."}
"""

import argparse
import base64
import logging

import requests

import config

logger = logging.getLogger(__name__)


class PDFExportError(RuntimeError):
    """PDF service failed or returned no document."""


def export_pdf_bytes(
    html: str,
    endpoint: str = config.PDF_SERVICE_URL,
    color_scheme: str = "dark",
    timeout: float = 60,
) -> bytes:
    payload = {
        "html": html,
        "format": "A4",
        "print_background": True,
        "color_scheme": color_scheme,
    }

    try:
        resp = requests.post(endpoint, json=payload, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise PDFExportError(f"PDF service request failed: {e}") from e

    pdf_b64 = data.get("pdf_base64") if isinstance(data, dict) else None
    if not pdf_b64:
        raise PDFExportError("No pdf_base64 returned from PDF service")

    pdf_bytes = base64.b64decode(pdf_b64)
    logger.info(f"PDF rendered ({len(pdf_bytes) / 1024:.1f} KB)")
    return pdf_bytes


def export_pdf(html_path: str, output_path: str, endpoint: str = config.PDF_SERVICE_URL) -> None:
    with open(html_path, "r", encoding="utf-8") as f:
        html = f.read()

    pdf_bytes = export_pdf_bytes(html, endpoint)
    with open(output_path, "wb") as f:
        f.write(pdf_bytes)

    print(f"PDF saved to {output_path} ({len(pdf_bytes) / 1024:.1f} KB)")


def main() -> None:
    parser = argparse.ArgumentParser(description="Export HTML to PDF via HTTP service")
    parser.add_argument("html_path", help="Path to input HTML file")
    parser.add_argument(
        "--output",
        "-o",
        default="report.pdf",
        help="Output PDF path (default: report.pdf)",
    )
    parser.add_argument(
        "--endpoint",
        "-e",
        default=config.PDF_SERVICE_URL,
        help="PDF service endpoint (default env PDF_SERVICE_URL)",
    )
    args = parser.parse_args()

    export_pdf(args.html_path, args.output, args.endpoint)


if __name__ == "__main__":
    main()
