from __future__ import annotations

from phonebook.application.ports.email_sender_port import EmailSenderPort


def verification_url(public_base_url: str, verification_token: str) -> str:
    return f"{public_base_url.rstrip('/')}/api/users/verify/{verification_token}"


def password_reset_url(public_base_url: str, reset_token: str) -> str:
    return f"{public_base_url.rstrip('/')}/reset-password?token={reset_token}"


def send_verification_email(
    *,
    email_sender: EmailSenderPort,
    public_base_url: str,
    to_email: str,
    verification_token: str,
) -> None:
    link = verification_url(public_base_url, verification_token)
    email_sender.send(
        to_email=to_email,
        subject="Verify your email",
        text_body=f"Click the link to verify your email: {link}",
    )


def send_password_reset_email(
    *,
    email_sender: EmailSenderPort,
    public_base_url: str,
    to_email: str,
    reset_token: str,
) -> None:
    link = password_reset_url(public_base_url, reset_token)
    email_sender.send(
        to_email=to_email,
        subject="Reset your password",
        text_body=(
            f"Use the link below to choose a new password: {link}\n"
            "If you did not request a password reset you can ignore this email."
        ),
    )
