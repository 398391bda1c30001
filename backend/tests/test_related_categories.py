"""
Tests for keyword-based related categories
"""
import pytest

from backend.app.assistant.categories import DEFAULT_CATEGORIES, related_categories


def test_bug_title():
    assert related_categories("Fix login bug") == [
        "Critical",
        "High Priority",
        "Bug Fix",
        "Error Resolution",
        "Debugging",
    ]


def test_empty_title_gets_default():
    assert related_categories("") == [
        "General",
        "Support",
        "Maintenance",
        "Documentation",
        "Testing",
    ]
    assert related_categories("") == DEFAULT_CATEGORIES


@pytest.mark.parametrize(
    "title,first_label",
    [
        ("New feature: exports", "Feature Request"),
        ("Speed up search", "Performance"),
        ("Redesign the settings page", "UI/UX"),
        ("Server returns 502", "Backend"),
        ("Android crash on launch", "Mobile"),
        ("Login throttling", "Security"),
        ("Quarterly report", "General"),
    ],
)
def test_keyword_groups(title, first_label):
    labels = related_categories(title)

    assert labels[0] == first_label
    assert len(labels) == 5


def test_matching_is_case_insensitive():
    assert related_categories("SECURITY AUDIT")[0] == "Security"


def test_earlier_group_wins():
    # "security" and "bug" both present; bug-fix is checked first
    assert related_categories("Security bug in login")[0] == "Critical"


def test_result_is_a_fresh_list():
    labels = related_categories("Fix it")
    labels.append("mutated")

    assert related_categories("Fix it")[-1] == "Debugging"
