# tests/core_test/test_matrix_service.py
"""
Tests for the adjacency-matrix codec (algoviz_core/services/matrix_service.py).
"""
import pytest

from algoviz_core.graph_platform.config import MatrixConfig
from algoviz_core.services.exceptions import MalformedMatrixError
from algoviz_core.services.matrix_service import MatrixCodec

from tests.conftest import build_graph

SAMPLE = """
0 4 0
4 0 2
0 2 0
"""


@pytest.fixture
def codec():
    return MatrixCodec()


def _triples(graph):
    return [(e.from_id, e.to_id, e.weight) for e in graph.edges]


# ═════════════════════════════════════════════════════════════════
#  IMPORT
# ═════════════════════════════════════════════════════════════════

class TestParse:

    def test_undirected_upper_triangle(self, codec):
        g = codec.parse(SAMPLE)
        assert list(g.vertices) == ["0", "1", "2"]
        assert _triples(g) == [("0", "1", 4), ("1", "2", 2)]
        assert not any(e.directed for e in g.edges)

    def test_directed_reads_every_cell(self, codec):
        g = codec.parse(SAMPLE, directed=True)
        assert _triples(g) == [("0", "1", 4), ("1", "0", 4), ("1", "2", 2), ("2", "1", 2)]
        assert all(e.directed for e in g.edges)

    def test_lower_triangle_ignored_when_undirected(self, codec):
        g = codec.parse("0 0\n3 0")
        assert g.edges == []

    def test_diagonal_becomes_self_loop(self, codec):
        g = codec.parse("5 0\n0 0")
        assert _triples(g) == [("0", "0", 5)]

    def test_default_labels(self, codec):
        g = codec.parse(SAMPLE)
        assert [v.label for v in g.get_all_vertices()] == ["V0", "V1", "V2"]

    def test_explicit_labels(self, codec):
        g = codec.parse(SAMPLE, labels="A, B, C")
        assert [v.label for v in g.get_all_vertices()] == ["A", "B", "C"]

    def test_label_list(self, codec):
        g = codec.parse(SAMPLE, labels=["x", "y", "z"])
        assert g.vertices["2"].label == "z"

    def test_edge_label_is_weight(self, codec):
        g = codec.parse("0 2.5\n0 0")
        assert g.edges[0].weight == 2.5
        assert g.edges[0].label == "2.5"

    def test_initial_row_positions(self, codec):
        g = codec.parse("0 1\n1 0")
        assert g.vertices["0"].position == (-100.0, 0.0)
        assert g.vertices["1"].position == (0.0, 0.0)

    def test_directives(self, codec):
        text = "# labels: P, Q\n# directed: true\n0 1\n0 0\n"
        g = codec.parse(text)
        assert [v.label for v in g.get_all_vertices()] == ["P", "Q"]
        assert g.edges[0].directed

    def test_arguments_override_directives(self, codec):
        text = "# labels: P, Q\n# directed: true\n0 1\n1 0\n"
        g = codec.parse(text, labels="M, N", directed=False)
        assert [v.label for v in g.get_all_vertices()] == ["M", "N"]
        assert len(g.edges) == 1

    def test_blank_lines_and_comments(self, codec):
        g = codec.parse("\n# weights below\n0 1\n\n1 0\n")
        assert g.get_number_of_vertices() == 2

    def test_graph_id(self, codec):
        assert codec.parse("0", graph_id="net").graph_id == "net"


# ═════════════════════════════════════════════════════════════════
#  VALIDATION
# ═════════════════════════════════════════════════════════════════

class TestMalformed:

    def test_non_numeric(self, codec):
        with pytest.raises(MalformedMatrixError, match="row 1, column 2"):
            codec.parse("0 x\n0 0")

    def test_not_square(self, codec):
        with pytest.raises(MalformedMatrixError, match="square"):
            codec.parse("0 1\n1")

    def test_empty(self, codec):
        with pytest.raises(MalformedMatrixError, match="empty"):
            codec.parse("  \n\n")

    @pytest.mark.parametrize("cell", ["101", "-1", "inf", "nan"])
    def test_out_of_range(self, codec, cell):
        with pytest.raises(MalformedMatrixError):
            codec.parse(f"0 {cell}\n0 0")

    def test_bounds_inclusive(self, codec):
        g = codec.parse("0 100\n0 0")
        assert g.edges[0].weight == 100

    def test_custom_bounds(self):
        codec = MatrixCodec(MatrixConfig(min_weight=1, max_weight=10))
        with pytest.raises(MalformedMatrixError, match="between 1 and 10"):
            codec.parse("0 11\n0 0")

    def test_label_count_mismatch(self, codec):
        with pytest.raises(MalformedMatrixError, match="Label count"):
            codec.parse(SAMPLE, labels="A, B")


# ═════════════════════════════════════════════════════════════════
#  EXPORT
# ═════════════════════════════════════════════════════════════════

class TestExport:

    def test_to_matrix_undirected_is_symmetric(self, codec, weighted_triangle):
        assert codec.to_matrix(weighted_triangle) == [
            [0, 1, 5],
            [1, 0, 2],
            [5, 2, 0],
        ]

    def test_to_matrix_directed_one_cell(self, codec):
        g = build_graph("AB", [("A", "B", 3, True)])
        assert codec.to_matrix(g) == [[0, 3], [0, 0]]

    def test_render(self, codec):
        g = build_graph("AB", [("A", "B", 3)])
        assert codec.render(g) == "# labels: A, B\n0\t3.00\n3.00\t0\n"

    def test_render_is_loadable(self, codec, weighted_triangle):
        g = codec.parse(codec.render(weighted_triangle))
        assert [v.label for v in g.get_all_vertices()] == ["A", "B", "C"]
        assert codec.to_matrix(g) == codec.to_matrix(weighted_triangle)

    def test_labels_with_commas_survive_reload(self, codec):
        g = build_graph("AB", [("A", "B", 3)])
        g.update_vertex("A", label="Paris, FR")
        g.update_vertex("B", label='say "hi"')
        text = codec.render(g)
        assert text.splitlines()[0] == '# labels: "Paris, FR", "say ""hi"""'
        reloaded = codec.parse(text)
        assert [v.label for v in reloaded.get_all_vertices()] == ["Paris, FR", 'say "hi"']

    def test_quoted_label_argument(self, codec):
        g = codec.parse(SAMPLE, labels='A, "B, C", D')
        assert [v.label for v in g.get_all_vertices()] == ["A", "B, C", "D"]
