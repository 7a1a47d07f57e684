"""Security helpers for the sign-in flow."""

import base64
import secrets
from urllib.parse import urlparse


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure random token.

    Args:
        length: Number of random bytes to generate (default 32)

    Returns:
        URL-safe base64 encoded token
    """
    return (
        base64.urlsafe_b64encode(secrets.token_bytes(length))
        .decode("utf-8")
        .rstrip("=")
    )


def generate_session_id() -> str:
    """Session identifiers carry 256 bits of entropy."""
    return generate_secure_token(32)


def sanitize_return_url(
    return_to: str | None,
    allowed_hosts: list[str] | None = None,
    fallback: str = "/",
) -> str:
    """Sanitize a post-login destination to prevent open redirects.

    Args:
        return_to: User-provided return URL
        allowed_hosts: Optional list of allowed hosts for absolute URLs
        fallback: Returned when ``return_to`` is empty or rejected

    Returns:
        A relative path, an absolute URL on an allowed host, or ``fallback``
    """
    if not return_to:
        return fallback

    return_to = return_to.strip()

    if return_to.startswith("/") and not return_to.startswith("//"):
        if all(ord(c) >= 32 for c in return_to) and "\\" not in return_to:
            return return_to

    if allowed_hosts and return_to.startswith(("http://", "https://")):
        if urlparse(return_to).hostname in allowed_hosts:
            return return_to

    return fallback


def scrub_login_input(form_input: dict[str, str], echo_password: bool) -> dict[str, str]:
    """Prepare submitted login fields for flashing back to the form.

    The password is blanked unless ``echo_password`` is set, which only the
    demo environment does.
    """
    scrubbed = {key: value for key, value in form_input.items() if key != "password"}
    if "password" in form_input:
        scrubbed["password"] = form_input["password"] if echo_password else ""
    return scrubbed
