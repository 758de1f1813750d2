"""Tests for label synchronization."""

from __future__ import annotations

from conftest import ANCESTOR_ID
from confluence_publisher.publisher.labels import LabelReconciler


def test_labels_converge_to_desired_set(confluence):
    confluence.labels[ANCESTOR_ID] = {"draft", "docs"}

    LabelReconciler(confluence).reconcile(ANCESTOR_ID, frozenset({"docs", "architecture", "api"}))

    assert confluence.labels[ANCESTOR_ID] == {"docs", "architecture", "api"}
    assert confluence.mutations() == [
        ("delete_label", ANCESTOR_ID, "draft"),
        ("add_labels", ANCESTOR_ID, ["api", "architecture"]),
    ]


def test_equal_label_sets_cause_no_calls(confluence):
    confluence.labels[ANCESTOR_ID] = {"docs"}

    LabelReconciler(confluence).reconcile(ANCESTOR_ID, frozenset({"docs"}))

    assert confluence.mutations() == []
