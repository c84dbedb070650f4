from __future__ import annotations

import pytest

from phonebook.shared.redaction import redact_email


@pytest.mark.parametrize(
    ("email", "expected"),
    [
        ("alice@example.com", "al***@example.com"),
        ("a@example.com", "a***@example.com"),
        ("not-an-email", "redacted"),
    ],
)
def test_redact_email_keeps_only_a_prefix_and_the_domain(email, expected):
    assert redact_email(email) == expected
