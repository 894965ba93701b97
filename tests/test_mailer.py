"""
SMTPMailer against a minimal local SMTP responder (plaintext, no SMTPUTF8).
"""
from __future__ import annotations

from dataclasses import replace
import smtplib
import socketserver
import threading

import pytest

from mamacare.core import mailer as mailer_module
from mamacare.core.mailer import EmailMessage, SMTPMailer
from mamacare.core.security import hash_secret
from mamacare.services.auth_service import AuthService


class _SMTPHandler(socketserver.StreamRequestHandler):
    def _reply(self, line: str) -> None:
        self.wfile.write((line + "\r\n").encode("ascii"))
        self.wfile.flush()

    def handle(self):
        self._reply("220 localhost ESMTP")
        while True:
            raw = self.rfile.readline()
            if not raw:
                return
            command = raw.decode("utf-8", "replace").strip()
            verb = command.split(" ", 1)[0].upper()
            if verb == "EHLO":
                self._reply("250-localhost")
                self._reply("250 AUTH PLAIN")
            elif verb == "HELO":
                self._reply("250 localhost")
            elif verb == "AUTH":
                self._reply("235 2.7.0 Authentication successful")
            elif verb in ("MAIL", "RCPT", "RSET", "NOOP"):
                self._reply("250 OK")
            elif verb == "DATA":
                self._reply("354 End data with <CR><LF>.<CR><LF>")
                lines = []
                while True:
                    line = self.rfile.readline()
                    if not line or line in (b".\r\n", b".\n"):
                        break
                    lines.append(line)
                self.server.delivered.append(b"".join(lines).decode("utf-8", "replace"))
                self._reply("250 OK queued")
            elif verb == "QUIT":
                self._reply("221 Bye")
                return
            else:
                self._reply("502 Command not implemented")


class _SMTPServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True


@pytest.fixture()
def smtp_server(monkeypatch):
    server = _SMTPServer(("127.0.0.1", 0), _SMTPHandler)
    server.delivered = []
    port = server.server_address[1]
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    # Port 465 means implicit TLS; the local responder speaks plaintext.
    def plain_smtp(host, _port, context=None, timeout=None):
        return smtplib.SMTP(host, port, timeout=timeout)

    monkeypatch.setattr(mailer_module.smtplib, "SMTP_SSL", plain_smtp)
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture()
def smtp_mailer(settings, smtp_server):
    return SMTPMailer(replace(settings, smtp_host="127.0.0.1", smtp_port=465), timeout=5)


def _message(to: str) -> EmailMessage:
    return EmailMessage(to=to, subject="Hello", html_body="<p>Hi</p>", text_body="Hi")


def test_delivers_to_ascii_address(smtp_mailer, smtp_server):
    assert smtp_mailer.send(_message("ama@x.com")) is True
    assert len(smtp_server.delivered) == 1
    assert "Subject: Hello" in smtp_server.delivered[0]


def test_unencodable_recipient_is_reported_not_raised(smtp_mailer, smtp_server):
    assert smtp_mailer.send(_message("amá@x.com")) is False
    assert smtp_server.delivered == []


def test_unreachable_relay_is_reported_not_raised(settings):
    closed = SMTPMailer(replace(settings, smtp_host="127.0.0.1", smtp_port=1), timeout=1)

    assert closed.send(_message("ama@x.com")) is False


def test_signup_and_verify_survive_mail_errors(settings, repo, tokens, smtp_mailer):
    service = AuthService(settings=settings, repository=repo, mailer=smtp_mailer, tokens=tokens)

    result = service.signup("Ama", "amá@x.com", "password1")

    assert result.notification.delivered is False
    user = repo.get_user_by_email("amá@x.com")
    assert user is not None and user.is_verified is False

    # The code never left the server; plant a known one to finish the flow.
    repo.replace_verification_code(user.id, hash_secret("123456"))
    session = service.verify_email("amá@x.com", "123456")

    assert tokens.verify(session.token).account_id == user.id
    assert repo.get_user(user.id).is_verified is True
