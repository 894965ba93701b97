"""Transactional email bodies."""
from __future__ import annotations

import html

from mamacare.core.mailer import EmailMessage


def _link(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + path


def welcome_email(name: str, email: str, code: str, base_url: str) -> EmailMessage:
    verify_url = _link(base_url, "/verify")
    html_body = f"""
        <h3>Welcome to MamaCare, {html.escape(name)}!</h3>
        <p>Thank you for signing up. Please use the following code to verify your email:</p>
        <h2>{code}</h2>
        <p>Enter this code in the MamaCare app at <a href="{verify_url}">Verify Email</a> to complete your registration.</p>
        <p>If you didn't sign up, please ignore this email.</p>
    """
    text_body = f"Welcome to MamaCare, {name}! Your verification code is {code}. Enter it at {verify_url}"
    return EmailMessage(to=email, subject="Welcome to MamaCare! Verify Your Email", html_body=html_body, text_body=text_body)


def verified_email(name: str, email: str, base_url: str) -> EmailMessage:
    dashboard_url = _link(base_url, "/dashboard")
    html_body = f"""
        <h3>Hello, {html.escape(name)}!</h3>
        <p>Your email ({html.escape(email)}) has been successfully verified!</p>
        <p>Welcome to MamaCare, your go-to app for managing your parenting journey. You can now explore features like:</p>
        <ul>
          <li>Baby Scheduler: Track feeding, sleep, and doctor visits.</li>
          <li>Expense Tracker: Monitor baby-related expenses.</li>
          <li>Milestones: Record your baby's special moments.</li>
        </ul>
        <p>You're logged in and ready to start! Visit <a href="{dashboard_url}">MamaCare Dashboard</a>.</p>
        <p>The MamaCare Team</p>
    """
    return EmailMessage(
        to=email,
        subject="MamaCare Account Verified!",
        html_body=html_body,
        text_body=f"Hello, {name}! Your email has been verified. Visit {dashboard_url} to get started.",
    )


def contact_email(name: str, email: str, message: str, operator: str) -> EmailMessage:
    html_body = f"""
        <h3>New Contact Message</h3>
        <p><strong>Name:</strong> {html.escape(name)}</p>
        <p><strong>Email:</strong> {html.escape(email)}</p>
        <p><strong>Message:</strong></p>
        <p>{html.escape(message)}</p>
    """
    return EmailMessage(
        to=operator,
        subject=f"MamaCare Contact Form - From {' '.join(name.split())}",
        html_body=html_body,
        text_body=f"From {name} <{email}>:\n\n{message}",
        reply_to=email,
    )
