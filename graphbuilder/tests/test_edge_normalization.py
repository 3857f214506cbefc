"""Tests for edge kind and route key normalization."""

import pytest

from graphbuilder.analysis.edge_normalization import (
    build_default_route_key,
    normalize_edges,
    to_route_key,
)
from graphbuilder.models.graph import EdgeKind, FlowEdge, FlowNode, out_degrees


def _node(node_id: str, label: str) -> FlowNode:
    return FlowNode(id=node_id, label=label, roles=["agent"])


def _edge(edge_id: str | None, source: str, target: str, **kwargs) -> FlowEdge:
    return FlowEdge(id=edge_id, source=source, target=target, **kwargs)


NODES = [
    _node("a", "Draft"),
    _node("b", "Review"),
    _node("c", "Publish"),
    _node("d", "Escalate"),
]


class TestToRouteKey:
    """Test the slug function."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Review", "review"),
            ("Lead Researcher", "lead_researcher"),
            ("  CRM -- Sync!! ", "crm_sync"),
            ("already_slug", "already_slug"),
            ("__edge__", "edge"),
            ("Café Menü", "caf_men"),
            ("v2 API", "v2_api"),
        ],
    )
    def test_slugifies(self, value, expected):
        """Labels should become lowercase underscore slugs."""
        assert to_route_key(value) == expected

    @pytest.mark.parametrize("value", ["", "!!!", "___", "   ", None])
    def test_empty_slug(self, value):
        """Empty or all-punctuation input yields an empty string, never raises."""
        assert to_route_key(value) == ""

    def test_output_is_ascii(self):
        """Route keys should be ASCII only."""
        assert to_route_key("Résumé ✓ 東京").isascii()


class TestBuildDefaultRouteKey:
    """Test the default route key fallback chain."""

    def test_prefers_target_label(self):
        """The target label slug should win when present."""
        assert build_default_route_key("Escalate Now", "abcdef123", 3) == "escalate_now"

    def test_falls_back_to_edge_id_prefix(self):
        """Unusable labels should fall back to the edge id."""
        assert build_default_route_key("!!!", "abcdef123", 3) == "route_abcdef"

    def test_falls_back_to_position(self):
        """Without label or id the position should be used."""
        assert build_default_route_key(None, None, 3) == "route_3"
        assert build_default_route_key("", "", 7) == "route_7"


class TestNormalizeEdges:
    """Test conditional classification and route key assignment."""

    def test_single_chain_stays_normal(self):
        """A -> B -> C has no branching, so every edge is normal."""
        edges = [_edge("e1", "a", "b"), _edge("e2", "b", "c")]
        result = normalize_edges(edges, NODES)
        assert [edge.kind for edge in result] == [EdgeKind.normal, EdgeKind.normal]
        assert all(edge.route_key is None for edge in result)

    def test_second_branch_promotes_both_edges(self):
        """Adding A -> D to A -> B -> C makes A's edges conditional with distinct keys."""
        edges = [_edge("e1", "a", "b"), _edge("e2", "b", "c"), _edge("e3", "a", "d")]
        result = normalize_edges(edges, NODES)

        by_id = {edge.id: edge for edge in result}
        assert by_id["e1"].kind == EdgeKind.conditional
        assert by_id["e3"].kind == EdgeKind.conditional
        assert by_id["e2"].kind == EdgeKind.normal
        assert by_id["e1"].route_key == "review"
        assert by_id["e3"].route_key == "escalate"

    def test_branch_removal_demotes_and_clears_key(self):
        """Dropping back to one outgoing edge silently demotes it."""
        edges = [
            _edge("e1", "a", "b", kind=EdgeKind.conditional, route_key="review"),
            _edge("e2", "b", "c"),
        ]
        result = normalize_edges(edges, NODES)
        assert result[0].kind == EdgeKind.normal
        assert result[0].route_key is None

    def test_existing_route_key_is_kept(self):
        """User-chosen route keys should survive normalization."""
        edges = [
            _edge("e1", "a", "b", route_key="approved"),
            _edge("e2", "a", "d"),
        ]
        result = normalize_edges(edges, NODES)
        assert result[0].route_key == "approved"
        assert result[1].route_key == "escalate"

    def test_blank_route_key_gets_default(self):
        """Whitespace-only keys count as missing."""
        edges = [
            _edge("e1", "a", "b", route_key="   "),
            _edge("e2", "a", "d"),
        ]
        result = normalize_edges(edges, NODES)
        assert result[0].route_key == "review"

    def test_route_key_falls_back_to_edge_id(self):
        """Targets with unusable labels fall back to the edge id prefix."""
        nodes = [_node("a", "Start"), _node("x", "???"), _node("y", "")]
        edges = [_edge("abcdefgh", "a", "x"), _edge("12345678", "a", "y")]
        result = normalize_edges(edges, nodes)
        assert [edge.route_key for edge in result] == ["route_abcdef", "route_123456"]

    def test_route_key_falls_back_to_position_without_id(self):
        """Freshly authored template edges have no id yet."""
        nodes = [_node("a", "Start"), _node("x", "???"), _node("y", "")]
        edges = [_edge(None, "a", "x"), _edge(None, "a", "y")]
        result = normalize_edges(edges, nodes)
        assert [edge.route_key for edge in result] == ["route_1", "route_2"]

    def test_missing_target_node_uses_fallback(self):
        """Dangling edges are the validator's concern; the normalizer stays total."""
        edges = [_edge("abcdefgh", "a", "ghost"), _edge("e2", "a", "b")]
        result = normalize_edges(edges, NODES)
        assert result[0].route_key == "route_abcdef"

    def test_default_keys_unique_for_equal_target_labels(self):
        """Two targets with the same label still get distinct keys."""
        nodes = [_node("a", "Start"), _node("x", "Worker"), _node("y", "Worker"), _node("z", "Worker")]
        edges = [_edge("e1", "a", "x"), _edge("e2", "a", "y"), _edge("e3", "a", "z")]
        result = normalize_edges(edges, nodes)
        assert [edge.route_key for edge in result] == ["worker", "worker_2", "worker_3"]

    def test_default_avoids_explicit_key_declared_later(self):
        """Explicit keys are reserved before defaults are handed out."""
        edges = [_edge("e1", "a", "b"), _edge("e2", "a", "d", route_key="review")]
        result = normalize_edges(edges, NODES)
        assert result[0].route_key == "review_2"
        assert result[1].route_key == "review"

    def test_keys_are_only_unique_per_source(self):
        """Two sources may each have a branch keyed the same way."""
        edges = [
            _edge("e1", "a", "b"),
            _edge("e2", "a", "d"),
            _edge("e3", "c", "b"),
            _edge("e4", "c", "d"),
        ]
        result = normalize_edges(edges, NODES)
        assert [edge.route_key for edge in result] == ["review", "escalate", "review", "escalate"]

    def test_preserves_order_and_identity(self):
        """Edges are never reordered and unchanged edges keep their identity."""
        edges = [_edge("e2", "b", "c"), _edge("e1", "a", "b")]
        result = normalize_edges(edges, NODES)
        assert [edge.id for edge in result] == ["e2", "e1"]
        assert result[0] is edges[0]
        assert result[1] is edges[1]

    def test_does_not_mutate_input(self):
        """Input edges should be left untouched."""
        edges = [_edge("e1", "a", "b"), _edge("e3", "a", "d")]
        normalize_edges(edges, NODES)
        assert edges[0].kind == EdgeKind.normal
        assert edges[0].route_key is None

    def test_idempotent(self):
        """Normalizing twice should equal normalizing once."""
        edges = [
            _edge("e1", "a", "b"),
            _edge("e2", "b", "c", kind=EdgeKind.conditional, route_key="stale"),
            _edge("e3", "a", "d"),
            _edge(None, "a", "c"),
        ]
        once = normalize_edges(edges, NODES)
        twice = normalize_edges(once, NODES)
        assert twice == once

    def test_conditional_iff_out_degree_above_one(self):
        """Kind and key presence should follow fan-out exactly."""
        edges = [
            _edge("e1", "a", "b"),
            _edge("e2", "a", "c"),
            _edge("e3", "b", "c"),
            _edge("e4", "c", "d"),
            _edge("e5", "c", "a"),
            _edge("e6", "d", "d"),
        ]
        result = normalize_edges(edges, NODES)
        counts = out_degrees(result)
        for edge in result:
            assert edge.is_conditional == (counts[edge.source] > 1)
            assert bool(edge.route_key) == edge.is_conditional


class TestPinnedConditional:
    """Test the one-shot override for a user-marked single outgoing edge."""

    def test_pinned_edge_stays_conditional_for_this_pass(self):
        """A pinned lone edge should stay conditional with a default key."""
        edges = [_edge("e1", "a", "b", kind=EdgeKind.conditional)]
        result = normalize_edges(edges, NODES, pinned_conditional={"e1"})
        assert result[0].kind == EdgeKind.conditional
        assert result[0].route_key == "review"

    def test_pin_is_not_persisted(self):
        """The next pass without the pin demotes the edge again."""
        edges = [_edge("e1", "a", "b", kind=EdgeKind.conditional)]
        pinned = normalize_edges(edges, NODES, pinned_conditional={"e1"})
        result = normalize_edges(pinned, NODES)
        assert result[0].kind == EdgeKind.normal
        assert result[0].route_key is None

    def test_preselected_key_survives_second_branch(self):
        """Adding a second branch right after the toggle keeps the chosen key."""
        edges = [_edge("e1", "a", "b", kind=EdgeKind.conditional, route_key="approve")]
        pinned = normalize_edges(edges, NODES, pinned_conditional={"e1"})
        result = normalize_edges([*pinned, _edge("e2", "a", "d")], NODES)
        assert [edge.route_key for edge in result] == ["approve", "escalate"]
        assert all(edge.kind == EdgeKind.conditional for edge in result)

    def test_pin_requires_conditional_request(self):
        """A pin on an edge that is still normal does nothing."""
        edges = [_edge("e1", "a", "b")]
        result = normalize_edges(edges, NODES, pinned_conditional={"e1"})
        assert result[0].kind == EdgeKind.normal

    def test_pin_requires_existing_endpoints(self):
        """Pins on dangling edges should be ignored."""
        edges = [_edge("e1", "a", "ghost", kind=EdgeKind.conditional)]
        result = normalize_edges(edges, NODES, pinned_conditional={"e1"})
        assert result[0].kind == EdgeKind.normal

    def test_pin_only_covers_named_edges(self):
        """Unpinned lone conditional edges should be demoted."""
        edges = [
            _edge("e1", "a", "b", kind=EdgeKind.conditional),
            _edge("e2", "c", "d", kind=EdgeKind.conditional),
        ]
        result = normalize_edges(edges, NODES, pinned_conditional={"e1"})
        assert [edge.kind for edge in result] == [EdgeKind.conditional, EdgeKind.normal]
