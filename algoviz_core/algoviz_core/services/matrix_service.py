"""
    Adjacency-matrix import and export.

    Import format
    ─────────────
    One row per line, cells separated by whitespace:

        0 4 0
        4 0 2
        0 2 0

    Zero means "no edge".  Any other cell must be a finite number inside
    the configured bounds (0..100 by default).  Lines starting with ``#``
    are directives understood by file loaders:

        # labels: A, B, "C, D"
        # directed: true

    Blank lines are ignored.  Vertices receive ids "0".."n-1"; an
    undirected import only materializes the upper triangle (diagonal
    included) so no edge appears twice.

    Export format
    ─────────────
    A ``# labels:`` header followed by tab-separated rows; zeros print as
    ``0``, other weights with two decimals.  The header makes an export
    loadable again through the same parser.
"""
import csv
import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional

from algoviz_api.models.graph import Graph
from algoviz_api.types import TypeValidator

from .exceptions import MalformedMatrixError

logger = logging.getLogger(__name__)

_DIRECTIVE_RE = re.compile(r"^#\s*(\w+)\s*:\s*(.*)$")


@dataclass
class MatrixDocument:
    """A parsed matrix text: numeric rows plus any directives it carried."""
    rows: List[List[float]]
    labels: Optional[List[str]] = None
    directed: Optional[bool] = None


class MatrixCodec:
    """
    Usage:
        codec = MatrixCodec()
        graph = codec.parse("0 1\\n1 0", labels="A, B")
        text = codec.render(graph)
    """

    def __init__(self, config=None):
        from algoviz_core.graph_platform.config import MatrixConfig, StyleDefaults
        self._config = config or MatrixConfig()
        self._style = StyleDefaults()

    # ── Import ───────────────────────────────────────────────────

    def read(self, text: str) -> MatrixDocument:
        """
        Split matrix text into numeric rows and directives, validating
        every cell.

        Raises:
            MalformedMatrixError: non-numeric, non-finite or out-of-range
                                  cell, or a non-square matrix.
        """
        rows: List[List[float]] = []
        labels: Optional[List[str]] = None
        directed: Optional[bool] = None

        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            if line.startswith("#"):
                match = _DIRECTIVE_RE.match(line)
                if match is None:
                    continue  # plain comment
                key, value = match.group(1).lower(), match.group(2).strip()
                if key == "labels":
                    labels = self._split_labels(value)
                elif key == "directed":
                    directed = value.lower() in ("true", "1", "yes")
                continue
            rows.append(self._parse_row(line, len(rows) + 1))

        if not rows:
            raise MalformedMatrixError("Matrix is empty")
        size = len(rows)
        for i, row in enumerate(rows, start=1):
            if len(row) != size:
                raise MalformedMatrixError(
                    f"Matrix must be square: row {i} has {len(row)} value(s), expected {size}"
                )
        return MatrixDocument(rows, labels, directed)

    def _parse_row(self, line: str, row_number: int) -> List[float]:
        row: List[float] = []
        for col_number, token in enumerate(line.split(), start=1):
            try:
                value = float(token)
            except ValueError:
                raise MalformedMatrixError(
                    f"Value at row {row_number}, column {col_number} is not a number: {token!r}"
                )
            if value == 0:
                row.append(0)
                continue
            if not math.isfinite(value):
                raise MalformedMatrixError(
                    f"Value at row {row_number}, column {col_number} is not finite"
                )
            if not self._config.min_weight <= value <= self._config.max_weight:
                raise MalformedMatrixError(
                    f"Weight at row {row_number}, column {col_number} must be between "
                    f"{self._config.min_weight} and {self._config.max_weight}"
                )
            row.append(TypeValidator.as_number(value))
        return row

    @staticmethod
    def _split_labels(text) -> List[str]:
        if isinstance(text, (list, tuple)):
            return [str(label).strip() for label in text]
        # labels containing commas arrive double-quoted
        fields = next(csv.reader([text], skipinitialspace=True), [])
        return [label.strip() for label in fields]

    @staticmethod
    def _quote_label(label: str) -> str:
        if "," in label or '"' in label:
            return '"' + label.replace('"', '""') + '"'
        return label

    def parse(self, text: str, labels=None, directed: Optional[bool] = None,
              graph_id: str = "matrix") -> Graph:
        """
        Build a new graph from matrix text.

        Args:
            text:     Matrix rows (directives allowed).
            labels:   Comma-separated string or list; overrides a
                      ``# labels:`` directive.  Must match the size.
            directed: Applies to every edge; overrides a ``# directed:``
                      directive.  Defaults to undirected.

        Raises:
            MalformedMatrixError: see ``read``; also a label count mismatch.
        """
        doc = self.read(text)
        size = len(doc.rows)

        if labels is not None and labels != "":
            label_list = self._split_labels(labels)
        elif doc.labels is not None:
            label_list = doc.labels
        else:
            label_list = [f"V{i}" for i in range(size)]
        if len(label_list) != size:
            raise MalformedMatrixError(
                f"Label count ({len(label_list)}) does not match matrix size ({size})"
            )

        if directed is None:
            directed = bool(doc.directed)

        graph = Graph(graph_id)
        for i in range(size):
            graph.add_vertex(str(i), label_list[i], i * 100 - size * 50, 0,
                             self._style.vertex_color, self._style.vertex_radius)

        for i in range(size):
            for j in range(size):
                weight = doc.rows[i][j]
                if weight == 0:
                    continue
                if directed or i <= j:
                    graph.add_edge(str(i), str(j), weight, str(weight),
                                   self._style.edge_color, self._style.edge_width, directed)

        logger.info("Matrix import: %d vertices, %d edges (%s)",
                    size, graph.get_number_of_edges(),
                    "directed" if directed else "undirected")
        return graph

    # ── Export ───────────────────────────────────────────────────

    @staticmethod
    def to_matrix(graph: Graph) -> List[List[float]]:
        """N×N weights in vertex enumeration order; undirected edges fill both cells."""
        index = {vid: i for i, vid in enumerate(graph.vertices)}
        size = len(index)
        matrix: List[List[float]] = [[0] * size for _ in range(size)]
        for edge in graph.edges:
            i, j = index.get(edge.from_id), index.get(edge.to_id)
            if i is None or j is None:
                continue
            matrix[i][j] = edge.weight
            if not edge.directed:
                matrix[j][i] = edge.weight
        return matrix

    def render(self, graph: Graph) -> str:
        """Matrix text with a label header, rows tab-separated."""
        labels = [v.label for v in graph.get_all_vertices()]
        lines = ["# labels: " + ", ".join(self._quote_label(label) for label in labels)]
        for row in self.to_matrix(graph):
            lines.append("\t".join("0" if value == 0 else f"{value:.2f}" for value in row))
        return "\n".join(lines) + "\n"
