from typing import Any, Dict, Iterable, Optional

# Keys whose values never leave the process unmasked
SENSITIVE_KEYS = frozenset(
    {
        "token",
        "privatekey",
        "private_key",
        "secret",
        "secret_word",
        "password",
        "md5_hash",
        "cardnumber",
        "card_number",
        "cvv",
        "ccno",
    }
)


def mask_value(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    if "@" in value:  # email
        name, _, domain = value.partition("@")
        return (name[:2] + "***@" + domain) if name else "***@" + domain
    if len(value) > 12:
        return value[:4] + "..." + value[-4:]
    return "***"


def sanitize_payload(payload: Dict, allowed_keys: Optional[Iterable[str]] = None) -> Dict:
    """
    Return a copy of a gateway payload that is safe to log or persist.

    Sensitive keys are masked at any depth. When ``allowed_keys`` is given,
    only those top-level keys are kept.
    """
    if not isinstance(payload, dict):
        return {}
    keys = list(allowed_keys) if allowed_keys is not None else list(payload.keys())
    result = {}
    for key in keys:
        if key not in payload:
            continue
        value = payload[key]
        if str(key).lower() in SENSITIVE_KEYS:
            result[key] = mask_value(value) if isinstance(value, str) else "***"
        elif isinstance(value, dict):
            result[key] = sanitize_payload(value)
        elif isinstance(value, list):
            result[key] = [sanitize_payload(item) if isinstance(item, dict) else item for item in value]
        else:
            result[key] = value
    return result
