"""Tests for mimefix_email.adapters."""

from __future__ import annotations

import email
import email.policy
from email.message import Message
from email.mime.text import MIMEText

import pytest

from mimefix_core.protocols import MailPartAdapter
from mimefix_email.adapters import StdlibPartAdapter

FOLDED_EML = (
    "Content-Type: application/octet-stream;\n"
    ' name="folded.xml"\n'
    "Content-Disposition: attachment; filename=\"folded.xml\"\n"
    "\n"
    "<a/>\n"
)


class TestStdlibPartAdapter:
    def setup_method(self):
        self.adapter = StdlibPartAdapter()

    def test_satisfies_protocol(self):
        assert isinstance(self.adapter, MailPartAdapter)

    def test_is_multipart(self, scenario_message):
        assert self.adapter.is_multipart(scenario_message) is True
        assert self.adapter.is_multipart(MIMEText("x")) is False

    def test_get_children_in_order(self, scenario_message):
        children = self.adapter.get_children(scenario_message)
        assert [c.get_filename() for c in children] == [None, "report.xml", "image.png"]
        # A copy, so committing it back does not alias the payload list.
        assert children is not scenario_message.get_payload()

    def test_get_children_malformed(self):
        part = Message()
        part["Content-Type"] = "multipart/mixed"
        part.set_payload("no boundary here")
        with pytest.raises(TypeError):
            self.adapter.get_children(part)

    def test_get_children_empty_container(self):
        part = Message()
        part["Content-Type"] = "multipart/mixed"
        assert self.adapter.get_children(part) == []

    def test_get_filename(self, make_attachment):
        assert self.adapter.get_filename(make_attachment("a.xml")) == "a.xml"
        assert self.adapter.get_filename(make_attachment(None)) is None

    def test_content_type_header_raw(self, make_attachment):
        att = make_attachment("a.xml", name="a.xml")
        assert self.adapter.get_content_type_header(att) == 'application/octet-stream; name="a.xml"'

    def test_content_type_header_unfolded(self):
        part = email.message_from_string(FOLDED_EML)
        assert (
            self.adapter.get_content_type_header(part)
            == 'application/octet-stream; name="folded.xml"'
        )

    def test_content_type_header_default(self):
        assert self.adapter.get_content_type_header(Message()) == "text/plain"

    def test_content_type_header_policy_default(self):
        part = email.message_from_string(FOLDED_EML, policy=email.policy.default)
        assert self.adapter.get_content_type_header(part).startswith(
            "application/octet-stream;"
        )

    def test_set_header_keeps_position(self, make_attachment):
        att = make_attachment("a.xml")
        keys_before = att.keys()
        self.adapter.set_content_type_header(att, "text/xml")
        assert att.keys() == keys_before
        assert att["Content-Type"] == "text/xml"

    def test_set_header_when_absent(self):
        part = Message()
        self.adapter.set_content_type_header(part, "text/xml")
        assert part["Content-Type"] == "text/xml"

    def test_set_content(self, scenario_message):
        children = self.adapter.get_children(scenario_message)
        self.adapter.set_content(scenario_message, children[:2])
        assert len(scenario_message.get_payload()) == 2

    def test_mark_dirty(self):
        msg = Message()
        msg["Content-Length"] = "42"
        self.adapter.mark_dirty(msg)
        assert "Content-Length" not in msg
        assert msg["MIME-Version"] == "1.0"

    def test_mark_dirty_keeps_existing_mime_version(self, scenario_message):
        self.adapter.mark_dirty(scenario_message)
        assert scenario_message.get_all("MIME-Version") == ["1.0"]
