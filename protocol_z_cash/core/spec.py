from __future__ import annotations

SPEC_HOST = "zips.z.cash"
PROTOCOL_PDF_URL = f"https://{SPEC_HOST}/protocol/protocol.pdf"

# Identifier prefixes that are anchors inside the protocol specification itself.
TERM_CODE_TAGS: frozenset[str] = frozenset({"TCR"})

ZIP_PREFIX = "zip-"


def classify(identifier: str) -> str:
    """Name the rule that matches this identifier: "term_code", "zip" or "none"."""
    prefix, sep, _ = identifier.partition(":")
    if prefix in TERM_CODE_TAGS:
        return "term_code"
    if prefix.startswith(ZIP_PREFIX) and sep:
        return "zip"
    return "none"


def get_location(identifier: str) -> str:
    """
    Returns the URL to this identifier in its matching protocol specification,
    or the empty string if no match is found.

    Only the text before the first colon is the prefix; any later colons stay
    in the anchor. A ZIP identifier needs the colon, but the anchor after it
    may be empty ("zip-200:" -> "https://zips.z.cash/zip-200#").
    """
    prefix, sep, anchor = identifier.partition(":")

    if prefix in TERM_CODE_TAGS:
        return f"{PROTOCOL_PDF_URL}#{identifier}"

    if prefix.startswith(ZIP_PREFIX) and sep:
        return f"https://{SPEC_HOST}/{prefix}#{anchor}"

    # No match.
    return ""
