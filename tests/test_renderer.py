"""Tests for ASCII tree rendering."""

import pytest

from refgraph_cli.models import (
    MAX_DEPTH_LIMIT,
    ASSEMBLY_TO_ASSEMBLY as A2A,
    PROJECT_TO_PROJECT as P2P,
    SOLUTION_TO_PROJECT as S2P,
    RenderOptions,
)
from refgraph_cli.renderer import TreeRenderer

NO_ASSEMBLIES = RenderOptions(max_depth=3, include_assembly_dependencies=False)


def _annotated(line: str) -> bool:
    return line.endswith(("*", "...", "[*CIRCULAR*]"))


class TestTreeRenderer:
    """Tests for TreeRenderer without assembly nesting."""

    def test_cycle_is_annotated(self, make_graph):
        """A -> B -> A expands B once and marks the return edge circular."""
        catalog, edges = make_graph(projects=["A", "B"], references=[("prj:A", "prj:B", P2P), ("prj:B", "prj:A", P2P)])

        lines = TreeRenderer(catalog, edges, NO_ASSEMBLIES).render("prj:A")

        assert lines == [
            "A",
            "+-- B",
            "    +-- A [*CIRCULAR*]",
        ]

    def test_self_loop(self, make_graph):
        catalog, edges = make_graph(projects=["A"], references=[("prj:A", "prj:A", P2P)])

        lines = TreeRenderer(catalog, edges, NO_ASSEMBLIES).render("prj:A")

        assert lines == ["A", "+-- A [*CIRCULAR*]"]

    def test_depth_limit_truncates(self, make_graph):
        """With max_depth=1, Root -> B -> C shows B truncated instead of C."""
        catalog, edges = make_graph(
            solutions=["Root"],
            projects=["B", "C"],
            references=[("sln:Root", "prj:B", S2P), ("prj:B", "prj:C", P2P)],
        )
        options = RenderOptions(max_depth=1, include_assembly_dependencies=False)

        lines = TreeRenderer(catalog, edges, options).render("sln:Root")

        assert lines == ["Root", "+-- B [MAX DEPTH REACHED]"]

    def test_leaf_at_depth_limit_is_not_marked(self, make_graph):
        catalog, edges = make_graph(solutions=["Root"], projects=["B"], references=[("sln:Root", "prj:B", S2P)])
        options = RenderOptions(max_depth=1, include_assembly_dependencies=False)

        assert TreeRenderer(catalog, edges, options).render("sln:Root") == ["Root", "+-- B"]

    def test_zero_depth(self, make_graph):
        catalog, edges = make_graph(solutions=["Root"], projects=["B"], references=[("sln:Root", "prj:B", S2P)])
        options = RenderOptions(max_depth=0, include_assembly_dependencies=False)

        assert TreeRenderer(catalog, edges, options).render("sln:Root") == ["Root [MAX DEPTH REACHED]"]

    def test_shallowest_occurrence_is_expanded(self, make_graph):
        """Zeta is at depth 1 and depth 2; only the depth-1 copy expands."""
        catalog, edges = make_graph(
            solutions=["Root"],
            projects=["Alpha", "Zeta", "Leaf"],
            references=[
                ("sln:Root", "prj:Zeta", S2P),
                ("sln:Root", "prj:Alpha", S2P),
                ("prj:Alpha", "prj:Zeta", P2P),
                ("prj:Zeta", "prj:Leaf", P2P),
            ],
        )

        lines = TreeRenderer(catalog, edges, NO_ASSEMBLIES).render("sln:Root")

        assert lines == [
            "Root",
            "|-- Alpha",
            "|   +-- Zeta ...",
            "+-- Zeta",
            "    +-- Leaf",
        ]

    def test_repeated_node_is_back_reference(self, make_graph):
        catalog, edges = make_graph(
            solutions=["Root"],
            projects=["A", "B", "C"],
            references=[
                ("sln:Root", "prj:A", S2P),
                ("sln:Root", "prj:B", S2P),
                ("prj:A", "prj:C", P2P),
                ("prj:B", "prj:C", P2P),
            ],
        )

        lines = TreeRenderer(catalog, edges, NO_ASSEMBLIES).render("sln:Root")

        assert lines == [
            "Root",
            "|-- A",
            "|   +-- C",
            "+-- B",
            "    +-- C *",
        ]

    def test_unresolved_child_is_skipped(self, make_graph):
        """Edges to ids outside the catalog are not printed and do not take the last branch."""
        catalog, edges = make_graph(
            solutions=["Root"],
            projects=["A"],
            references=[("sln:Root", "prj:A", S2P), ("sln:Root", "prj:zzz-missing", S2P)],
        )

        lines = TreeRenderer(catalog, edges, NO_ASSEMBLIES).render("sln:Root")

        assert lines == ["Root", "+-- A"]

    def test_unresolved_reference_does_not_hide_subtree(self, make_graph):
        """X is reachable at depth 2 only through a missing node, so it expands under B."""
        catalog, edges = make_graph(
            solutions=["Root"],
            projects=["A", "B", "X", "Y"],
            references=[
                ("sln:Root", "prj:M", S2P),
                ("prj:M", "prj:X", P2P),
                ("sln:Root", "prj:A", S2P),
                ("prj:A", "prj:B", P2P),
                ("prj:B", "prj:X", P2P),
                ("prj:X", "prj:Y", P2P),
            ],
        )
        options = RenderOptions(max_depth=4, include_assembly_dependencies=False)

        lines = TreeRenderer(catalog, edges, options).render("sln:Root")

        assert lines == [
            "Root",
            "+-- A",
            "    +-- B",
            "        +-- X",
            "            +-- Y",
        ]

    def test_missing_root(self, make_graph):
        catalog, edges = make_graph(projects=["A"])

        assert TreeRenderer(catalog, edges, NO_ASSEMBLIES).render("sln:Nope") == []

    def test_children_sorted_by_name(self, make_graph):
        catalog, edges = make_graph(
            solutions=["Root"],
            projects=["beta", "Alpha", "Gamma"],
            references=[
                ("sln:Root", "prj:Gamma", S2P),
                ("sln:Root", "prj:beta", S2P),
                ("sln:Root", "prj:Alpha", S2P),
            ],
        )

        lines = TreeRenderer(catalog, edges, NO_ASSEMBLIES).render("sln:Root")

        assert lines == ["Root", "|-- Alpha", "|-- beta", "+-- Gamma"]

    def test_output_independent_of_edge_order(self, make_graph):
        references = [
            ("sln:Root", "prj:A", S2P),
            ("sln:Root", "prj:B", S2P),
            ("prj:A", "prj:C", P2P),
            ("prj:B", "prj:D", P2P),
            ("prj:D", "prj:A", P2P),
        ]
        projects = ["A", "B", "C", "D"]
        forward = make_graph(solutions=["Root"], projects=projects, references=references)
        backward = make_graph(solutions=["Root"], projects=projects, references=list(reversed(references)))

        first = TreeRenderer(*forward, NO_ASSEMBLIES).render("sln:Root")
        second = TreeRenderer(*forward, NO_ASSEMBLIES).render("sln:Root")
        third = TreeRenderer(*backward, NO_ASSEMBLIES).render("sln:Root")

        assert first == second == third

    def test_nested_prefixes(self, make_graph):
        catalog, edges = make_graph(
            solutions=["Root"],
            projects=["A", "B", "C", "D"],
            references=[
                ("sln:Root", "prj:A", S2P),
                ("sln:Root", "prj:D", S2P),
                ("prj:A", "prj:B", P2P),
                ("prj:A", "prj:C", P2P),
                ("prj:B", "prj:C", P2P),
            ],
        )

        lines = TreeRenderer(catalog, edges, NO_ASSEMBLIES).render("sln:Root")

        assert lines == [
            "Root",
            "|-- A",
            "|   |-- B",
            "|   |   +-- C ...",
            "|   +-- C",
            "+-- D",
        ]


class TestSampleTrees:
    """Rendering the sample snapshot."""

    def test_app_tree_without_assemblies(self, sample_snapshot):
        renderer = TreeRenderer(sample_snapshot.catalog, sample_snapshot.edges, NO_ASSEMBLIES)

        assert renderer.render("sln-app") == [
            "App",
            "|-- Core",
            "|   +-- Utils",
            "|       +-- Core [*CIRCULAR*]",
            "+-- Web",
            "    |-- Core *",
            "    +-- Data",
            "        +-- Core *",
        ]

    def test_tools_tree(self, sample_snapshot):
        renderer = TreeRenderer(sample_snapshot.catalog, sample_snapshot.edges, NO_ASSEMBLIES)

        assert renderer.render("sln-tools") == [
            "Tools",
            "+-- Utils",
            "    +-- Core",
            "        +-- Utils [*CIRCULAR*]",
        ]

    def test_app_tree_with_assemblies(self, sample_snapshot):
        renderer = TreeRenderer(sample_snapshot.catalog, sample_snapshot.edges, RenderOptions())

        assert renderer.render("sln-app") == [
            "App",
            "|-- Core",
            "|   [assembly] Core.dll",
            "|       |-- Newtonsoft.Json",
            "|       +-- Utils",
            "|   +-- Utils",
            "|       +-- Core [*CIRCULAR*]",
            "+-- Web",
            "    [assembly] Web.dll",
            "        +-- Core",
            "            |-- Newtonsoft.Json",
            "            +-- Utils",
            "    |-- Core *",
            "    +-- Data",
            "        +-- Core *",
        ]

    def test_each_node_expanded_once(self, sample_snapshot):
        renderer = TreeRenderer(sample_snapshot.catalog, sample_snapshot.edges, NO_ASSEMBLIES)

        for root_id in ("sln-app", "sln-tools"):
            expanded = [line.split("-- ")[-1] for line in renderer.render(root_id)[1:] if not _annotated(line)]
            assert len(expanded) == len(set(expanded))


class TestAssemblyNesting:
    """Assembly sub-trees under project lines."""

    def test_assembly_tree_has_own_depth_limit(self, make_graph):
        catalog, edges = make_graph(
            solutions=["S"],
            projects=["Web"],
            assemblies=["Web", "Core", "Data"],
            references=[
                ("sln:S", "prj:Web", S2P),
                ("asm:Web", "asm:Core", A2A),
                ("asm:Core", "asm:Data", A2A),
            ],
        )
        options = RenderOptions(max_depth=1, include_assembly_dependencies=True)

        lines = TreeRenderer(catalog, edges, options).render("sln:S")

        assert lines == [
            "S",
            "+-- Web",
            "    [assembly] Web.dll",
            "        +-- Core [MAX DEPTH REACHED]",
        ]

    def test_assembly_cycle(self, make_graph):
        catalog, edges = make_graph(
            projects=["Web"],
            assemblies=["Web", "Core"],
            references=[("asm:Web", "asm:Core", A2A), ("asm:Core", "asm:Web", A2A)],
        )

        lines = TreeRenderer(catalog, edges, RenderOptions()).render("prj:Web")

        assert lines == [
            "Web",
            "[assembly] Web.dll",
            "    +-- Core",
            "        +-- Web [*CIRCULAR*]",
        ]

    def test_assembly_without_dependencies_is_not_nested(self, make_graph):
        catalog, edges = make_graph(
            solutions=["S"],
            projects=["Web"],
            assemblies=["Web"],
            references=[("sln:S", "prj:Web", S2P)],
        )

        lines = TreeRenderer(catalog, edges, RenderOptions()).render("sln:S")

        assert lines == ["S", "+-- Web"]

    def test_disabled_nesting(self, sample_snapshot):
        renderer = TreeRenderer(sample_snapshot.catalog, sample_snapshot.edges, NO_ASSEMBLIES)

        assert not any("[assembly]" in line for line in renderer.render("sln-app"))

    def test_explicit_assembly_map(self, make_graph):
        catalog, edges = make_graph(
            projects=["Web"],
            assemblies=["Other", "Lib"],
            references=[("asm:Other", "asm:Lib", A2A)],
        )

        lines = TreeRenderer(catalog, edges, RenderOptions(), assembly_map={"prj:Web": "asm:Other"}).render("prj:Web")

        assert lines == ["Web", "[assembly] Other.dll", "    +-- Lib"]


class TestDepthBound:
    """The configurable depth is bounded so deep chains render without exhausting the stack."""

    def test_long_chain_at_largest_depth(self, make_graph):
        names = [f"P{i:03d}" for i in range(250)]
        references = [(f"prj:{a}", f"prj:{b}", P2P) for a, b in zip(names, names[1:])]
        catalog, edges = make_graph(projects=names, references=references)
        options = RenderOptions(max_depth=MAX_DEPTH_LIMIT, include_assembly_dependencies=False)

        lines = TreeRenderer(catalog, edges, options).render("prj:P000")

        assert len(lines) == MAX_DEPTH_LIMIT + 1
        assert lines[-1].endswith("P200 [MAX DEPTH REACHED]")

    def test_depth_above_bound_rejected(self):
        with pytest.raises(ValueError):
            RenderOptions(max_depth=MAX_DEPTH_LIMIT + 1)
