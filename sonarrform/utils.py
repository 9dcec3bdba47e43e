import hashlib
import json
import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def snake_case(name):
    """Convert a server field name such as ``useSsl`` or ``seedCriteria.seedTime``."""
    name = name.rsplit(".", 1)[-1]
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def camel_case(name):
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _forms(secret):
    """Spellings of a secret inside JSON bodies and bytes reprs."""
    secret = str(secret)
    return {
        secret,
        json.dumps(secret)[1:-1],
        json.dumps(secret, ensure_ascii=False)[1:-1],
        repr(secret.encode("utf-8"))[2:-1],
    }


def redact(text, secrets, placeholder="********"):
    if not text:
        return text

    forms = set()
    for secret in secrets:
        if secret:
            forms |= _forms(secret)

    # Longest first so a secret that contains another is fully masked
    for form in sorted(forms, key=len, reverse=True):
        text = text.replace(form, placeholder)

    return text


def stable_hash(data):
    """Content hash of a JSON-serialisable mapping, usable as a positive int64 id."""
    encoded = json.dumps(data, sort_keys=True, default=str).encode("utf-8")
    return int.from_bytes(hashlib.sha256(encoded).digest()[:8], "big") >> 1


def normalise_path(value):
    if not isinstance(value, str):
        return value

    value = value.strip()
    return value.rstrip("/") or value
