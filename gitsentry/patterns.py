"""
Domain and credential signatures used to classify candidate content.
Everything here is pure: no state, no I/O.
"""

import re
import json
import base64

# -----------------------
# Patterns
# -----------------------
SECRET_PATTERNS = [
    ("AWS_SECRET_ACCESS_KEY", re.compile(r'(?i)aws_secret_access_key\s*[:=]\s*["\']?([A-Za-z0-9/+=]{40})')),
    ("AWS_ACCESS_KEY_ID",     re.compile(r'\b(?:AKIA|ASIA)[0-9A-Z]{16}\b')),

    ("GH_TOKEN",              re.compile(r'\bgh[pousr]_[A-Za-z0-9]{36}\b')),
    ("GH_TOKEN_PAT",          re.compile(r'\bgithub_pat_[A-Za-z0-9_]{22}_[A-Za-z0-9_]{59}\b')),

    ("STRIPE_SECRET",         re.compile(r'\bsk_(?:live|test)_[A-Za-z0-9]{24,}\b')),
    ("GOOGLE_API_KEY",        re.compile(r'\bAIza[0-9A-Za-z\-_]{35}\b')),

    ("SLACK_TOKEN",           re.compile(r'\bxox[baprs]-[A-Za-z0-9-]{10,}\b')),
    ("SLACK_WEBHOOK",         re.compile(r'https?://hooks\.slack\.com/services/[A-Za-z0-9/_-]{20,}')),
    ("SENDGRID_KEY",          re.compile(r'\bSG\.[A-Za-z0-9_-]{16,}\.[A-Za-z0-9_-]{40,}\b')),

    ("JWT",                   re.compile(r'\beyJ[A-Za-z0-9_\-]{10,}\.[A-Za-z0-9_\-]{10,}\.[A-Za-z0-9_\-]{10,}\b')),

    ("GENERIC_PRIVATE_KEY",   re.compile(r'(?i)-----BEGIN\s+(?:RSA\s+|DSA\s+|EC\s+|OPENSSH\s+|PGP\s+)?PRIVATE\s+KEY(?:\s+BLOCK)?-----')),
    ("GENERIC_API_KEY",       re.compile(r'(?i)\b(?:api[_-]?key|apikey)["\']?\s*[:=]\s*["\']?([^\s"\',;]+)')),
    ("GENERIC_PASSWORD_KV",   re.compile(r'(?i)\b(?:password|passwd|pwd|db_password)["\']?\s*[:=]\s*["\']?([^\s"\',;]+)')),
    ("GENERIC_SECRET_KV",     re.compile(r'(?i)\b(?:secret|secret_key|client_secret)["\']?\s*[:=]\s*["\']?([^\s"\',;]+)')),
    ("GENERIC_TOKEN_KV",      re.compile(r'(?i)\b(?:access_token|auth_token|github_token|token)["\']?\s*[:=]\s*["\']?([^\s"\',;]+)')),

    ("MONGODB_URI",           re.compile(r'(?i)\bmongodb(?:\+srv)?://[^\s:/@]+:[^\s@]+@[^\s]+')),
    ("REDIS_URI",             re.compile(r'(?i)\bredis://[^\s:/@]*:[^\s@]+@[^\s]+')),
]

# Value checks applied after a pattern hits; a failing value is not counted
PROVIDERS = {
    "STRIPE_SECRET":  lambda v: v.startswith(("sk_live_", "sk_test_")) and len(v) >= 32,
    "GOOGLE_API_KEY": lambda v: v.startswith("AIza") and len(v) == 39,
    "GH_TOKEN":       lambda v: len(v) >= 40,
    "SLACK_WEBHOOK":  lambda v: v.startswith("https://hooks.slack.com/services/"),
}


def jwt_header_json_ok(token):
    parts = token.split('.')
    if len(parts) != 3:
        return False
    head = parts[0]
    try:
        hdr = base64.urlsafe_b64decode(head + '=' * (-len(head) % 4))
        data = json.loads(hdr.decode('utf-8', errors='ignore'))
    except ValueError:
        return False
    return isinstance(data, dict) and "alg" in data


def _as_text(content):
    if content is None:
        return ""
    if not isinstance(content, str):
        content = str(content)
    return content


def _matching(text, domains):
    low = text.lower()
    hits = []
    for domain in domains:
        if domain and domain.lower() in low and domain not in hits:
            hits.append(domain)
    return hits


def scan_for_domains(content, domains):
    """Return the watched domains that occur in ``content``, in watch-list order.

    Matching is a case-insensitive substring test, so ``api.acme.com`` and
    ``ACME.COM`` both match a watched ``acme.com``.
    """
    text = _as_text(content)
    if not text:
        return []
    return _matching(text, domains)


def url_domains(url, domains):
    """Watched domains mentioned in an item's URL (repo names, gist paths)."""
    text = _as_text(url)
    if not text:
        return []
    return _matching(text, domains)


def _value_ok(name, match):
    if match.groups():
        val = next((g for g in match.groups() if g), match.group(0))
    else:
        val = match.group(0)
    if not PROVIDERS.get(name, lambda _: True)(val):
        return False
    if name == "JWT" and not jwt_header_json_ok(val):
        return False
    return True


def detect_credentials(content):
    """Return distinct credential labels whose signature matches ``content``."""
    text = _as_text(content)
    if not text:
        return []
    kinds = []
    for name, pat in SECRET_PATTERNS:
        if any(_value_ok(name, m) for m in pat.finditer(text)):
            kinds.append(name)
    return kinds


def mask_value(v):
    return v if len(v) <= 8 else f"{v[:4]}…{v[-2:]}"


def _mask_match(m):
    if not m.groups():
        return mask_value(m.group(0))
    idx = next((i for i, g in enumerate(m.groups(), 1) if g), None)
    if idx is None:
        return m.group(0)
    whole = m.group(0)
    start = m.start(idx) - m.start(0)
    end = m.end(idx) - m.start(0)
    return whole[:start] + mask_value(whole[start:end]) + whole[end:]


def redact(text):
    """Mask every credential value that a signature picks out of ``text``."""
    text = _as_text(text)
    for name, pat in SECRET_PATTERNS:
        # the key header carries no secret of its own
        if name != "GENERIC_PRIVATE_KEY":
            text = pat.sub(_mask_match, text)
    return text
