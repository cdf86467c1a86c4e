"""
    CommandProcessor: parses raw CLI strings and dispatches commands.

    Design Patterns
    ───────────────
    • Interpreter   – parses the CLI text into structured ``Command`` objects.
    • Facade        – single ``process(text, workspace)`` entry-point hides
                      all parsing and error translation.

    Undo history lives in the Workspace, so the processor itself is
    stateless and one instance can serve any number of workspaces.
"""
from __future__ import annotations

import logging
import shlex
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from algoviz_api.exceptions import AlgoVizError
from algoviz_core.services.layout_service import LayoutKind
from algoviz_core.services.structure_service import StructureQuery
from algoviz_core.services.traversal_service import AlgorithmKind, StepMode

from .commands import (
    Command,
    CommandResult,
    CreateVertexCommand,
    EditVertexCommand,
    DeleteVertexCommand,
    CreateEdgeCommand,
    EditEdgeCommand,
    DeleteEdgeCommand,
    RunCommand,
    StepCommand,
    StopCommand,
    AnalyzeCommand,
    LayoutCommand,
    ClearCommand,
    UndoCommand,
    InfoCommand,
    HelpCommand,
    ListCommand,
)

if TYPE_CHECKING:
    from ..workspace import Workspace

logger = logging.getLogger(__name__)

_ANALYSES = {
    'components': StructureQuery.COMPONENTS,
    'cut-vertices': StructureQuery.CUT_VERTICES,
    'bridges': StructureQuery.BRIDGES,
}


class CommandProcessor:
    """
    Parses raw CLI input, creates ``Command`` objects and executes them
    on a workspace.

    Usage:
        processor = CommandProcessor()
        result = processor.process("create vertex --id=A", workspace)
    """

    # ── Public API ───────────────────────────────────────────────

    def process(self, text: str, workspace: Workspace) -> CommandResult:
        """
        Parse and execute a single CLI command.

        Returns:
            ``CommandResult``; every platform error becomes
            ``success=False`` with the error message.
        """
        text = self._strip_comments(text).strip()
        if not text:
            return CommandResult(False, "Empty command. Type 'help' for usage.", workspace.graph)

        try:
            command = self._parse(text)
        except ValueError as e:
            return CommandResult(False, f"Parse error: {e}", workspace.graph)

        return self._execute(command, workspace)

    # ── Execution engine ─────────────────────────────────────────

    @staticmethod
    def _execute(command: Command, workspace: Workspace) -> CommandResult:
        try:
            result = command.execute(workspace)
        except (AlgoVizError, ValueError, IndexError) as exc:
            logger.info("Command %s rejected: %s", type(command).__name__, exc)
            return CommandResult(False, str(exc), workspace.graph)
        return result

    # ── Comment handling ────────────────────────────────────────

    @staticmethod
    def _strip_comments(text: str) -> str:
        """
        Strip inline comments: everything after an unquoted ``#``
        that starts a word, so colors like ``#ff0000`` survive.

        Example:
            >>> CommandProcessor._strip_comments("create edge A B   # a comment")
            'create edge A B'
        """
        in_single = False
        in_double = False
        for i, ch in enumerate(text):
            if ch == "'" and not in_double:
                in_single = not in_single
            elif ch == '"' and not in_single:
                in_double = not in_double
            elif (ch == '#' and not in_single and not in_double
                  and (i == 0 or text[i - 1].isspace())
                  and (i + 1 == len(text) or text[i + 1].isspace())):
                return text[:i].rstrip()
        return text

    # ── Parser ───────────────────────────────────────────────────

    def _parse(self, text: str) -> Command:
        """
        Parse raw CLI text into a ``Command`` object.

        Raises:
            ValueError: If the text cannot be parsed.
        """
        try:
            tokens = shlex.split(text)
        except ValueError:
            # Fallback: simple split if quotes are malformed
            tokens = text.split()

        if not tokens:
            raise ValueError("Empty command.")

        verb = tokens[0].lower()
        args = tokens[1:]

        # ── Single-word commands ──
        if verb == "help":
            return HelpCommand()
        if verb == "undo":
            return UndoCommand()
        if verb == "clear":
            return ClearCommand()
        if verb == "step":
            return StepCommand()
        if verb == "stop":
            return StopCommand()

        if verb == "list":
            target = args[0].lower() if args else None
            if target not in (None, "vertices", "edges"):
                raise ValueError(f"Unknown list target: '{target}'. Use 'vertices' or 'edges'.")
            return ListCommand(target)

        if verb == "info":
            if not args:
                return InfoCommand()
            target_type = args[0].lower()
            if target_type not in ("vertex", "edge"):
                raise ValueError("Usage: info [vertex <id>|edge <index>]")
            if len(args) < 2:
                raise ValueError(f"Usage: info {target_type} <{'id' if target_type == 'vertex' else 'index'}>")
            return InfoCommand(target_type, args[1])

        if verb == "run":
            return self._parse_run(args)
        if verb == "analyze":
            return self._parse_analyze(args)
        if verb == "layout":
            return self._parse_layout(args)

        # ── create / edit / delete ──
        if verb in ("create", "edit", "delete"):
            if not args:
                raise ValueError(f"Usage: {verb} <vertex|edge> ...")
            entity = args[0].lower()
            remaining = args[1:]

            if verb == "create" and entity == "vertex":
                return self._parse_create_vertex(remaining)
            if verb == "create" and entity == "edge":
                return self._parse_create_edge(remaining)
            if verb == "edit" and entity == "vertex":
                return self._parse_edit_vertex(remaining)
            if verb == "edit" and entity == "edge":
                return self._parse_edit_edge(remaining)
            if verb == "delete" and entity == "vertex":
                vertex_id, _ = self._require_option(remaining, "id")
                return DeleteVertexCommand(vertex_id)
            if verb == "delete" and entity == "edge":
                return DeleteEdgeCommand(self._require_index(remaining))

            raise ValueError(f"Unknown entity: '{entity}'. Use 'vertex' or 'edge'.")

        raise ValueError(f"Unknown command: '{verb}'. Type 'help' for usage.")

    # ── Token parsers ────────────────────────────────────────────

    @staticmethod
    def _extract_option(tokens: List[str], name: str) -> Tuple[Optional[str], List[str]]:
        """
        Extract ``--name=<value>`` (or ``--name <value>``) from the tokens.
        Returns (value or None, remaining_tokens).
        """
        flag = f"--{name}"
        remaining: List[str] = []
        found: Optional[str] = None
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.startswith(flag + "="):
                found = token[len(flag) + 1:]
            elif token == flag and i + 1 < len(tokens):
                found = tokens[i + 1]
                i += 1
            else:
                remaining.append(token)
            i += 1
        return found, remaining

    def _require_option(self, tokens: List[str], name: str) -> Tuple[str, List[str]]:
        value, remaining = self._extract_option(tokens, name)
        if value is None or value == "":
            raise ValueError(f"Missing required --{name}=<value>.")
        return value, remaining

    def _require_index(self, tokens: List[str]) -> int:
        raw, _ = self._require_option(tokens, "index")
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"Edge index must be an integer: '{raw}'.")

    @staticmethod
    def _extract_properties(tokens: List[str]) -> Tuple[Dict[str, Any], List[str]]:
        """
        Extract ``--property Key=Value`` pairs from the tokens.
        Returns (properties_dict, remaining_tokens).
        """
        props: Dict[str, Any] = {}
        remaining: List[str] = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token == "--property" and i + 1 < len(tokens):
                kv = tokens[i + 1]
                i += 2
            elif token.startswith("--property="):
                kv = token[len("--property="):]
                i += 1
            else:
                remaining.append(token)
                i += 1
                continue

            eq_pos = kv.find("=")
            if eq_pos <= 0:
                raise ValueError(f"Invalid property format: '{kv}'. Expected Key=Value.")
            props[kv[:eq_pos].lower()] = kv[eq_pos + 1:]

        return props, remaining

    @staticmethod
    def _pop_flag(tokens: List[str], flag: str) -> Tuple[bool, List[str]]:
        remaining = [t for t in tokens if t != flag]
        return len(remaining) != len(tokens), remaining

    # ── Compound parsers ─────────────────────────────────────────

    def _parse_create_vertex(self, tokens: List[str]) -> CreateVertexCommand:
        vertex_id, remaining = self._extract_option(tokens, "id")
        props, _ = self._extract_properties(remaining)
        return CreateVertexCommand(vertex_id or None, props)

    def _parse_create_edge(self, tokens: List[str]) -> CreateEdgeCommand:
        props, remaining = self._extract_properties(tokens)
        directed, remaining = self._pop_flag(remaining, "--directed")
        undirected, remaining = self._pop_flag(remaining, "--undirected")
        if directed and undirected:
            raise ValueError("Use either --directed or --undirected, not both.")

        positional = [t for t in remaining if not t.startswith("--")]
        if len(positional) != 2:
            raise ValueError("create edge requires <from_id> <to_id> as positional arguments.")
        return CreateEdgeCommand(positional[0], positional[1], directed, props)

    def _parse_edit_vertex(self, tokens: List[str]) -> EditVertexCommand:
        vertex_id, remaining = self._require_option(tokens, "id")
        props, _ = self._extract_properties(remaining)
        if not props:
            raise ValueError("edit vertex requires at least one --property Key=Value.")
        return EditVertexCommand(vertex_id, props)

    def _parse_edit_edge(self, tokens: List[str]) -> EditEdgeCommand:
        index = self._require_index(tokens)
        _, remaining = self._extract_option(tokens, "index")
        props, _ = self._extract_properties(remaining)
        if not props:
            raise ValueError("edit edge requires at least one --property Key=Value.")
        return EditEdgeCommand(index, props)

    def _parse_run(self, tokens: List[str]) -> RunCommand:
        if not tokens:
            raise ValueError("Usage: run bfs|dfs|dijkstra --from=<id> [--to=<id>]")
        try:
            kind = AlgorithmKind(tokens[0].lower())
        except ValueError:
            raise ValueError(f"Unknown algorithm: '{tokens[0]}'. Use bfs, dfs or dijkstra.")
        remaining = tokens[1:]

        source, remaining = self._require_option(remaining, "from")
        target, remaining = self._extract_option(remaining, "to")
        delay, remaining = self._extract_option(remaining, "delay")
        auto, remaining = self._pop_flag(remaining, "--auto")
        if kind is AlgorithmKind.DIJKSTRA and not target:
            raise ValueError("run dijkstra requires --to=<id>.")

        delay_ms = None
        if delay is not None:
            try:
                delay_ms = float(delay)
            except ValueError:
                raise ValueError(f"Delay must be a number of milliseconds: '{delay}'.")
        mode = StepMode.AUTO if auto else StepMode.MANUAL
        return RunCommand(kind, source, target or None, mode, delay_ms)

    @staticmethod
    def _parse_analyze(tokens: List[str]) -> AnalyzeCommand:
        what = tokens[0].lower() if tokens else None
        if what not in _ANALYSES:
            raise ValueError("Usage: analyze components|cut-vertices|bridges")
        return AnalyzeCommand(_ANALYSES[what])

    def _parse_layout(self, tokens: List[str]) -> LayoutCommand:
        if not tokens:
            raise ValueError("Usage: layout force|circle|grid|tree [--root=<id>]")
        try:
            kind = LayoutKind(tokens[0].lower())
        except ValueError:
            raise ValueError(f"Unknown layout: '{tokens[0]}'. Use force, circle, grid or tree.")
        root, _ = self._extract_option(tokens[1:], "root")
        if kind is LayoutKind.TREE and not root:
            raise ValueError("layout tree requires --root=<id>.")
        return LayoutCommand(kind, root)
