"""Tests for lexical path resolution."""

import pytest

from depgraph_cli.config import AnalysisConfig
from depgraph_cli.resolver import PathResolver, collapse_path

KNOWN = {
    "/src/utils/x.ts",
    "/src/components/Button.tsx",
    "/src/lib/index.ts",
    "/src/exact",
    "/src/exact.ts",
    "/src/both.ts",
    "/src/both/index.ts",
    "/src/ordered.tsx",
    "/src/ordered.js",
    "/src/data.json",
}


@pytest.fixture
def resolver() -> PathResolver:
    return PathResolver(AnalysisConfig())


class TestCollapsePath:

    def test_dot_segments_are_removed(self):
        assert collapse_path("/src/app", "./a/../b") == "/src/app/b"

    def test_parent_segments_walk_up(self):
        assert collapse_path("/src/app/admin", "../../lib/db") == "/src/lib/db"

    def test_parent_above_root_is_clamped(self):
        assert collapse_path("/src", "../../../x") == "/x"

    def test_empty_base_dir(self):
        assert collapse_path("", "./a") == "/a"


class TestPathResolver:

    @pytest.mark.parametrize("specifier", ["react", "next/link", "@scope/pkg", "lodash/fp"])
    def test_bare_specifiers_are_external(self, resolver, specifier):
        assert resolver.is_external(specifier)
        assert resolver.resolve(specifier, "/src/app/page.tsx", KNOWN) is None

    def test_alias_resolves_against_source_root(self, resolver):
        assert resolver.resolve("@/utils/x", "/src/app/page.tsx", KNOWN) == "/src/utils/x.ts"

    def test_alias_and_relative_specifiers_agree(self, resolver):
        via_alias = resolver.resolve("@/utils/x", "/src/components/Button.tsx", KNOWN)
        via_relative = resolver.resolve("../utils/x", "/src/components/Button.tsx", KNOWN)
        assert via_alias == via_relative == "/src/utils/x.ts"

    def test_exact_match_beats_extension(self, resolver):
        assert resolver.resolve("./exact", "/src/main.ts", KNOWN) == "/src/exact"

    def test_extension_beats_index_file(self, resolver):
        assert resolver.resolve("./both", "/src/main.ts", KNOWN) == "/src/both.ts"

    def test_extension_list_order_breaks_ties(self, resolver):
        assert resolver.resolve("./ordered", "/src/main.ts", KNOWN) == "/src/ordered.tsx"

    def test_directory_falls_back_to_index(self, resolver):
        assert resolver.resolve("./lib", "/src/main.ts", KNOWN) == "/src/lib/index.ts"
        assert resolver.resolve("./lib/", "/src/main.ts", KNOWN) == "/src/lib/index.ts"

    def test_json_extension(self, resolver):
        assert resolver.resolve("./data", "/src/main.ts", KNOWN) == "/src/data.json"

    def test_missing_local_file_is_unresolved(self, resolver):
        assert resolver.resolve("./nope", "/src/main.ts", KNOWN) is None

    def test_resolution_is_deterministic(self, resolver):
        results = {resolver.resolve("../both", "/src/app/page.tsx", KNOWN) for _ in range(5)}
        assert results == {"/src/both.ts"}

    def test_longest_alias_prefix_wins(self):
        config = AnalysisConfig(aliases={"@/": "/src/", "@/lib/": "/packages/lib/"})
        known = {"/packages/lib/x.ts", "/src/lib/x.ts"}
        assert PathResolver(config).resolve("@/lib/x", "/src/a.ts", known) == "/packages/lib/x.ts"

    def test_custom_extension_and_index_lists(self):
        config = AnalysisConfig(
            aliases={"~/": "/app/"},
            resolve_extensions=[".mjs"],
            index_files=["main.mjs"],
        )
        known = {"/app/util.mjs", "/app/feature/main.mjs", "/app/util.ts"}
        resolver = PathResolver(config)

        assert resolver.resolve("~/util", "/app/x.mjs", known) == "/app/util.mjs"
        assert resolver.resolve("~/feature", "/app/x.mjs", known) == "/app/feature/main.mjs"
        # "@/" is not configured any more, so it counts as a package name
        assert resolver.resolve("@/util", "/app/x.mjs", known) is None
