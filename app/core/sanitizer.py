import re


def redact_pii(message: str) -> str:
    """Redact personally identifiable information from log messages.

    Admin emails end up in audit diagnostics, so they are masked here along
    with IPs, bearer tokens, long keys and password-like values.
    """
    if not isinstance(message, str):
        return str(message)

    # Emails: admin@wakaf.or.id -> a***@wakaf.or.id
    message = re.sub(
        r"[\w.-]+@[\w.-]+\.\w+",
        lambda m: m.group()[0] + "***@" + m.group().split("@")[1],
        message,
    )

    # IPv4: 10.0.0.12 -> 10.0.0.***
    message = re.sub(
        r"\b(\d{1,3}\.\d{1,3}\.\d{1,3}\.)\d{1,3}\b", r"\1***", message
    )

    message = re.sub(
        r"eyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+",
        "[JWT_REDACTED]",
        message,
    )

    message = re.sub(r"\b[a-fA-F0-9]{32,}\b", "[API_KEY_REDACTED]", message)

    message = re.sub(
        r'(password|passwd|pwd|secret|refresh_token)["\']?\s*[:=]\s*["\']?[^"\'&\s]+',
        r"\1=[REDACTED]",
        message,
        flags=re.IGNORECASE,
    )

    return message
