"""Tests for proximal site pair detection."""

import pytest

from conftest import make_site

from tfbsnexus.core.exceptions import InvalidParameterError
from tfbsnexus.core.proximity import (
    ProximityOptions,
    find_cluster_site_pairs,
    find_proximal_pairs,
    proximal_partners,
    site_distance,
)


class TestSiteDistance:

    def test_adjacent_sites(self):
        assert site_distance(make_site(100, 110), make_site(111, 115)) == 0

    def test_symmetric(self):
        a, b = make_site(100, 110), make_site(200, 210)
        assert site_distance(a, b) == site_distance(b, a) == 89

    def test_overlapping_sites(self):
        assert site_distance(make_site(100, 110), make_site(110, 115)) is None


class TestFindProximalPairs:

    def test_adjacent_partner_paired(self):
        anchor = make_site(100, 110, pattern_id="X")
        partner = make_site(111, 115, pattern_id="Y")
        pairs = find_proximal_pairs([anchor], [partner], ProximityOptions(max_distance=5))
        assert len(pairs) == 1
        assert pairs[0].distance == 0
        assert pairs[0].anchor is anchor
        assert pairs[0].partner is partner

    def test_distant_partner_not_paired(self):
        anchor = make_site(100, 110, pattern_id="X")
        partner = make_site(200, 210, pattern_id="Y")
        assert find_proximal_pairs([anchor], [partner], ProximityOptions(max_distance=5)) == []

    def test_partner_upstream_of_anchor(self):
        anchor = make_site(100, 110, pattern_id="X")
        partner = make_site(90, 97, pattern_id="Y")
        pairs = find_proximal_pairs([anchor], [partner], ProximityOptions(max_distance=5))
        assert [p.distance for p in pairs] == [2]

    def test_overlapping_partner_skipped(self):
        anchor = make_site(100, 110, pattern_id="X")
        partner = make_site(105, 120, pattern_id="Y")
        assert find_proximal_pairs([anchor], [partner], ProximityOptions(max_distance=50)) == []

    def test_distance_bound_holds(self):
        anchors = [make_site(100, 110, pattern_id="X"), make_site(400, 410, pattern_id="X")]
        partners = [make_site(s, s + 5, pattern_id="Y") for s in range(0, 600, 25)]
        options = ProximityOptions(max_distance=30)
        pairs = find_proximal_pairs(anchors, partners, options)
        assert pairs
        for pair in pairs:
            assert 0 <= pair.distance <= options.max_distance
            assert not pair.anchor.overlaps(pair.partner)

    def test_partner_shared_by_two_anchors(self):
        anchors = [make_site(100, 110, pattern_id="X"), make_site(130, 140, pattern_id="X")]
        partner = make_site(118, 122, pattern_id="Y")
        pairs = find_proximal_pairs(anchors, [partner], ProximityOptions(max_distance=10))
        assert [(p.anchor.start, p.distance) for p in pairs] == [(100, 7), (130, 7)]
        assert proximal_partners(pairs) == [partner]

    def test_same_pattern_never_self_paired(self):
        site = make_site(100, 110, pattern_id="X")
        assert find_proximal_pairs([site], [site], ProximityOptions(max_distance=100)) == []

    def test_same_pattern_pair_counted_once(self):
        sites = [make_site(100, 110, pattern_id="X"), make_site(115, 120, pattern_id="X")]
        pairs = find_proximal_pairs(sites, sites, ProximityOptions(max_distance=10))
        assert len(pairs) == 1
        assert pairs[0].anchor.start == 100
        assert pairs[0].partner.start == 115

    def test_ordered_by_anchor_then_partner(self):
        anchors = [make_site(300, 310, pattern_id="X"), make_site(100, 110, pattern_id="X")]
        partners = [make_site(120, 125, pattern_id="Y"), make_site(90, 95, pattern_id="Y")]
        pairs = find_proximal_pairs(anchors, partners, ProximityOptions(max_distance=300))
        keys = [(p.anchor.start, p.partner.start) for p in pairs]
        assert keys == sorted(keys)

    def test_negative_max_distance_rejected(self):
        with pytest.raises(InvalidParameterError):
            ProximityOptions(max_distance=-1)


class TestProximalPartners:

    def test_unique_in_first_seen_order(self):
        anchors = [make_site(100, 110, pattern_id="X"), make_site(140, 150, pattern_id="X")]
        partners = [make_site(125, 128, pattern_id="Y"), make_site(115, 118, pattern_id="Y")]
        pairs = find_proximal_pairs(anchors, partners, ProximityOptions(max_distance=20))
        assert [p.start for p in proximal_partners(pairs)] == [115, 125]

    def test_empty(self):
        assert proximal_partners([]) == []


class TestFindClusterSitePairs:

    def test_hits_merged_before_pairing(self):
        anchor_hits = [
            make_site(100, 108, pattern_id="MA0001"),
            make_site(105, 112, pattern_id="MA0003"),
        ]
        partner_hits = [
            make_site(115, 120, pattern_id="MA0002"),
            make_site(119, 125, pattern_id="MA0004"),
        ]
        pairs = find_cluster_site_pairs(
            anchor_hits, "C1", partner_hits, "C2", ProximityOptions(max_distance=5)
        )
        assert len(pairs) == 1
        pair = pairs[0]
        assert (pair.anchor.start, pair.anchor.end, pair.anchor.pattern_id) == (100, 112, "C1")
        assert (pair.partner.start, pair.partner.end, pair.partner.pattern_id) == (115, 125, "C2")
        assert pair.distance == 2

    def test_same_cluster_pairs(self):
        hits = [make_site(100, 105, pattern_id="MA0001"), make_site(110, 115, pattern_id="MA0002")]
        pairs = find_cluster_site_pairs(hits, "C1", hits, "C1", ProximityOptions(max_distance=10))
        assert [(p.anchor.start, p.partner.start, p.distance) for p in pairs] == [(100, 110, 4)]
