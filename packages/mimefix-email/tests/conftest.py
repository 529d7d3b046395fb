"""Shared fixtures for mimefix-email tests."""

from __future__ import annotations

from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import pytest

from mimefix_email.config import RewriteConfig


# ---------------------------------------------------------------------------
# Message builders
# ---------------------------------------------------------------------------

PLAIN_BODY = "Hello, this is a test email body."
XML_PAYLOAD = b"<?xml version='1.0'?><report><row>1</row></report>"
PNG_PAYLOAD = b"\x89PNG\r\n\x1a\n" + b"\x00" * 50


def _attachment(
    filename: str | None,
    maintype: str = "application",
    subtype: str = "octet-stream",
    payload: bytes = XML_PAYLOAD,
    **params: str,
) -> MIMEBase:
    """Build a base64 attachment part with an optional filename."""
    att = MIMEBase(maintype, subtype, **params)
    att.set_payload(payload)
    encoders.encode_base64(att)
    if filename is not None:
        att.add_header("Content-Disposition", "attachment", filename=filename)
    return att


def _mixed(*parts, subtype: str = "mixed") -> MIMEMultipart:
    msg = MIMEMultipart(subtype)
    for part in parts:
        msg.attach(part)
    return msg


def _envelope_headers(msg: MIMEMultipart) -> MIMEMultipart:
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Date"] = "Mon, 17 Feb 2026 12:00:00 +0000"
    msg["Subject"] = "Quarterly report"
    msg["Message-ID"] = "<test-123@example.com>"
    return msg


@pytest.fixture
def make_attachment():
    """Factory for attachment parts: ``make_attachment(filename, maintype, subtype)``."""
    return _attachment


@pytest.fixture
def make_multipart():
    """Factory for multipart containers: ``make_multipart(*parts, subtype=...)``."""
    return _mixed


@pytest.fixture
def scenario_message() -> MIMEMultipart:
    """multipart/mixed with a text body, report.xml and image.png."""
    return _envelope_headers(
        _mixed(
            MIMEText(PLAIN_BODY, "plain"),
            _attachment("report.xml", name="report.xml"),
            _attachment("image.png", "image", "png", payload=PNG_PAYLOAD),
        )
    )


@pytest.fixture
def nested_message() -> MIMEMultipart:
    """mixed( alternative(plain, html), mixed(data.xml, notes.txt), summary.xml )."""
    return _envelope_headers(
        _mixed(
            _mixed(
                MIMEText(PLAIN_BODY, "plain"),
                MIMEText("<p>Hello</p>", "html"),
                subtype="alternative",
            ),
            _mixed(
                _attachment("data.xml", charset="us-ascii", name="data.xml"),
                _attachment("notes.txt", "text", "plain", payload=b"notes"),
            ),
            _attachment("summary.xml", "application", "xml"),
        )
    )


@pytest.fixture
def sample_eml_bytes(scenario_message: MIMEMultipart) -> bytes:
    """Serialized form of ``scenario_message``."""
    return scenario_message.as_bytes()


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@pytest.fixture
def xml_config() -> RewriteConfig:
    """Rewrite ``*.xml`` attachments to text/xml, no exclusion."""
    return RewriteConfig(
        file_pattern=r".*\.xml",
        target_primary_type="text",
        target_sub_type="xml",
    )


@pytest.fixture
def xml_config_with_exclusion() -> RewriteConfig:
    """Same as ``xml_config`` but leaves any ``xml`` subtype alone."""
    return RewriteConfig(
        file_pattern=r".*\.xml",
        sub_type_exclusion_pattern="[xX][mM][lL]",
        target_primary_type="text",
        target_sub_type="xml",
    )
