"""Related-category labels for a drafted ticket title (keyword based)."""

from __future__ import annotations

# ── Keyword table ─────────────────────────────────────────────────────
# Checked top to bottom; the first row with a keyword in the title wins,
# so "security bug" resolves to the bug-fix labels.
_KEYWORD_CATEGORIES: list[tuple[tuple[str, ...], list[str]]] = [
    (
        ("bug", "fix", "error"),
        ["Critical", "High Priority", "Bug Fix", "Error Resolution", "Debugging"],
    ),
    (
        ("feature", "enhancement", "improvement"),
        ["Feature Request", "Enhancement", "User Experience", "Functionality", "Innovation"],
    ),
    (
        ("performance", "speed", "optimization"),
        ["Performance", "Optimization", "Speed", "Efficiency", "Scalability"],
    ),
    (
        ("ui", "interface", "design"),
        ["UI/UX", "Design", "Interface", "User Experience", "Visual"],
    ),
    (
        ("api", "backend", "server"),
        ["Backend", "API", "Server", "Database", "Infrastructure"],
    ),
    (
        ("mobile", "app", "ios", "android"),
        ["Mobile", "App Development", "iOS", "Android", "Cross-platform"],
    ),
    (
        ("security", "auth", "login"),
        ["Security", "Authentication", "Authorization", "Privacy", "Encryption"],
    ),
]

DEFAULT_CATEGORIES: list[str] = ["General", "Support", "Maintenance", "Documentation", "Testing"]


def related_categories(title: str) -> list[str]:
    """
    Returns the five labels related to ``title``.

    Keywords match as substrings of the lower-cased title ("ui" also matches
    "build"). Titles without any keyword get ``DEFAULT_CATEGORIES``.
    """
    lower = title.lower()
    for keywords, labels in _KEYWORD_CATEGORIES:
        if any(kw in lower for kw in keywords):
            return list(labels)
    return list(DEFAULT_CATEGORIES)
