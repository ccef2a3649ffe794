"""Tests for reachability and impact traversals."""

from depgraph_cli.analysis import impact_tree, impacted_files, reachable_files


class TestReachability:

    def test_entry_and_its_imports_are_reachable(self, scenario_graph):
        assert reachable_files(scenario_graph, ["/src/A.ts"]) == {"/src/A.ts", "/src/B.ts"}

    def test_no_entry_points_reach_nothing(self, scenario_graph):
        assert reachable_files(scenario_graph, []) == set()

    def test_unknown_entry_points_are_skipped(self, scenario_graph):
        result = reachable_files(scenario_graph, ["/src/missing.ts", "/src/C.ts"])
        assert result == {"/src/C.ts", "/src/B.ts"}

    def test_cycle_terminates(self, cyclic_graph):
        assert reachable_files(cyclic_graph, ["/src/a.ts"]) == {"/src/a.ts", "/src/b.ts"}

    def test_self_import_terminates(self, cyclic_graph):
        assert reachable_files(cyclic_graph, ["/src/s.ts"]) == {"/src/s.ts"}

    def test_graph_method_delegates(self, scenario_graph):
        assert scenario_graph.reachable(["/src/A.ts"]) == {"/src/A.ts", "/src/B.ts"}


class TestImpact:

    def test_direct_dependents(self, scenario_graph):
        assert impacted_files(scenario_graph, "/src/B.ts") == ["/src/A.ts", "/src/C.ts"]

    def test_leaf_with_no_dependents(self, scenario_graph):
        assert impacted_files(scenario_graph, "/src/A.ts") == []

    def test_unknown_file_has_no_impact(self, scenario_graph):
        assert impacted_files(scenario_graph, "/src/missing.ts") == []

    def test_cycle_never_reports_the_seed(self, cyclic_graph):
        assert impacted_files(cyclic_graph, "/src/a.ts") == ["/src/b.ts"]
        assert impacted_files(cyclic_graph, "/src/s.ts") == []

    def test_diamond_reports_each_file_once(self, cyclic_graph):
        assert impacted_files(cyclic_graph, "/src/base.ts") == ["/src/l.ts", "/src/r.ts", "/src/top.ts"]

    def test_max_depth_limits_hops(self, cyclic_graph):
        assert impacted_files(cyclic_graph, "/src/base.ts", max_depth=1) == ["/src/l.ts", "/src/r.ts"]
        assert impacted_files(cyclic_graph, "/src/base.ts", max_depth=0) == []

    def test_graph_method_delegates(self, cyclic_graph):
        assert cyclic_graph.impacted("/src/base.ts", max_depth=1) == ["/src/l.ts", "/src/r.ts"]


class TestImpactTree:

    def test_renders_reverse_edges(self, cyclic_graph):
        tree = impact_tree(cyclic_graph, "/src/base.ts")
        lines = tree.splitlines()

        assert lines[0] == "/src/base.ts"
        assert "  |- imported by -> /src/l.ts" in lines
        assert "  |- imported by -> /src/r.ts" in lines
        # top is reached through both l and r
        assert any(line.endswith("/src/top.ts (seen)") for line in lines)

    def test_dependents_nest_under_their_import(self, cyclic_graph):
        assert impact_tree(cyclic_graph, "/src/base.ts").splitlines() == [
            "/src/base.ts",
            "  |- imported by -> /src/l.ts",
            "    |- imported by -> /src/top.ts",
            "  |- imported by -> /src/r.ts",
            "    |- imported by -> /src/top.ts (seen)",
        ]

    def test_cycle_back_to_seed_is_marked_seen(self, cyclic_graph):
        assert impact_tree(cyclic_graph, "/src/a.ts").splitlines() == [
            "/src/a.ts",
            "  |- imported by -> /src/b.ts",
            "    |- imported by -> /src/a.ts (seen)",
        ]

    def test_unknown_seed(self, scenario_graph):
        assert impact_tree(scenario_graph, "/src/nope.ts") == "/src/nope.ts (not in graph)"

    def test_depth_limit_stops_expansion(self, cyclic_graph):
        tree = impact_tree(cyclic_graph, "/src/base.ts", max_depth=1)
        assert "top.ts" not in tree
