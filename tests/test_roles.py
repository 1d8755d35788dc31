from app.analytics.roles import (
    CLUSTER_ROLES,
    Cluster,
    cluster_distribution,
    cluster_for_role,
    resolve_current_role,
    role_codes_for,
    role_distribution,
)


def test_mode_needs_strictly_greater_count():
    # dalla piu' recente: A,A,B,A,B,B,B -> B (4 > 3)
    res = resolve_current_role(["ЦЗ", "ЦЗ", "ЦП", "ЦЗ", "ЦП", "ЦП", "ЦП"])
    assert res.role == "ЦП"
    assert res.cluster == Cluster.CENTRAL_MIDFIELD


def test_tie_goes_to_most_recent_role():
    res = resolve_current_role(["ЦП", "ЦЗ", "ЦЗ", "ЦП"])
    assert res.role == "ЦП"


def test_blank_codes_are_ignored():
    res = resolve_current_role([None, "", "  ", "ВР"])
    assert res.role == "ВР"
    assert res.cluster == Cluster.GOALKEEPER


def test_no_codes_resolves_nothing():
    res = resolve_current_role([])
    assert res.role is None
    assert res.cluster is None


def test_unknown_code_has_no_cluster():
    res = resolve_current_role(["XYZ"])
    assert res.role == "XYZ"
    assert res.cluster is None


def test_cluster_table_round_trip():
    for cluster, codes in CLUSTER_ROLES.items():
        assert role_codes_for(cluster) == frozenset(codes)
        for code in codes:
            assert cluster_for_role(code) == cluster
            assert cluster_for_role(f" {code} ") == cluster
    assert cluster_for_role(None) is None


def test_role_and_cluster_distribution():
    roles = role_distribution(["ЦЗ", "ЦЗ", "ЛЗ", None, "ЦП"])
    assert roles == [
        {"role": "ЦЗ", "count": 2, "pct": 50.0},
        {"role": "ЛЗ", "count": 1, "pct": 25.0},
        {"role": "ЦП", "count": 1, "pct": 25.0},
    ]
    clusters = cluster_distribution(roles)
    assert [c["cluster"] for c in clusters] == ["CB", "CM"]
    assert clusters[0]["pct"] == 75.0
    assert clusters[0]["label"] == "Centre-back"


def test_role_distribution_empty():
    assert role_distribution([None, ""]) == []
    assert cluster_distribution([]) == []
