"""
Parser module for structogram generator.

Loads the JSON emitted by the external static analyzer into control-flow
trees and method descriptors.

Three payload shapes are accepted:
    - a control-flow node: {"kind": "sequence", "children": [...]}
    - a method: {"name": ..., "signature": ..., "controlTree": {...}}
    - a parser document: {"nodes": [{"name": "Cls", "methods": [...]}]}
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .models import (
    CatchClause,
    ControlNode,
    IfNode,
    LoopNode,
    MethodInfo,
    Param,
    SequenceNode,
    StatementNode,
    SwitchCase,
    SwitchNode,
    TryNode,
    UnknownNode,
)
from .text import method_name_from_signature

logger = logging.getLogger(__name__)

Payload = Union[str, bytes, Dict[str, Any]]


class ParseError(Exception):
    """Raised when an analyzer payload is structurally invalid."""

    pass


@dataclass
class ParseResult:
    """
    A loaded input.

    Attributes:
        tree: The control-flow tree to draw, or None when the method has
            no body.
        method: The method that owns the tree, when the input described one.
    """

    tree: Optional[ControlNode] = None
    method: Optional[MethodInfo] = None


class Parser:
    """Parses analyzer payloads into control-flow trees and methods."""

    def parse(self, payload: Payload) -> ControlNode:
        """
        Parse a control-flow tree.

        Args:
            payload: A JSON string or an already decoded dict.

        Returns:
            The root node. Unknown kinds are kept as UnknownNode.

        Raises:
            ParseError: If the payload is not a JSON object or a list field
                holds something other than a list.
        """
        return self._node(self._decode(payload), "root")

    def parse_method(self, payload: Payload) -> MethodInfo:
        """
        Parse a method descriptor and its control tree.

        Raises:
            ParseError: If the payload or its control tree is malformed.
        """
        data = self._decode(payload)
        return self._method(data, "method")

    def find_method(self, document: Payload, name: str) -> MethodInfo:
        """
        Find a method in a parser document.

        Args:
            document: {"nodes": [{"name": ..., "methods": [...]}]}
            name: "Class.method" or a bare method name. A bare name
                matches the first method with that name.

        Raises:
            ParseError: If the document is malformed or has no such method.
        """
        data = self._decode(document)
        class_name, _, method_name = name.rpartition(".")

        for index, entry in enumerate(self._list(data, "nodes", "document")):
            if not isinstance(entry, dict):
                raise ParseError(f"document/nodes[{index}] must be an object")
            if class_name and entry.get("name") != class_name:
                continue
            path = f"document/nodes[{index}]"
            for method_index, method in enumerate(self._list(entry, "methods", path)):
                method_path = f"{path}/methods[{method_index}]"
                if not isinstance(method, dict):
                    raise ParseError(f"{method_path} must be an object")
                parsed = self._method(method, method_path)
                if self._method_name(parsed) == method_name:
                    logger.debug("Found method %s at %s", name, method_path)
                    return parsed

        raise ParseError(f"Method not found: {name}")

    def load(self, payload: Payload, method_name: Optional[str] = None) -> ParseResult:
        """
        Load any accepted payload shape.

        Args:
            payload: A control tree, a method, or a parser document.
            method_name: Method to select from a parser document.

        Returns:
            ParseResult with the tree to draw and its method, if any.

        Raises:
            ParseError: If the payload is malformed, or it is a parser
                document and no method (or an unknown one) was named.
        """
        data = self._decode(payload)

        if "nodes" in data:
            if not method_name:
                raise ParseError("Input is a parser document; a method name is required")
            method = self.find_method(data, method_name)
            return ParseResult(tree=method.control_tree, method=method)

        if "controlTree" in data or "signature" in data:
            method = self._method(data, "method")
            return ParseResult(tree=method.control_tree, method=method)

        return ParseResult(tree=self._node(data, "root"))

    def _decode(self, payload: Payload) -> Dict[str, Any]:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                raise ParseError(f"Invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise ParseError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        return payload

    def _string(self, data: Dict[str, Any], key: str) -> Optional[str]:
        value = data.get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def _list(self, data: Dict[str, Any], key: str, path: str) -> List[Any]:
        value = data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise ParseError(f"{path}/{key} must be a list")
        return value

    def _nodes(self, data: Dict[str, Any], key: str, path: str) -> Tuple[ControlNode, ...]:
        return tuple(
            self._node(entry, f"{path}/{key}[{index}]")
            for index, entry in enumerate(self._list(data, key, path))
        )

    def _node(self, data: Any, path: str) -> ControlNode:
        if not isinstance(data, dict):
            raise ParseError(f"{path} must be an object")

        kind = data.get("kind")
        if kind == "statement":
            return StatementNode(text=self._string(data, "text"))

        if kind == "sequence":
            return SequenceNode(children=self._nodes(data, "children", path))

        if kind == "if":
            return IfNode(
                condition=self._string(data, "condition"),
                then_branch=self._nodes(data, "thenBranch", path),
                else_branch=self._nodes(data, "elseBranch", path),
            )

        if kind == "loop":
            return LoopNode(
                loop_kind=self._string(data, "loopKind"),
                condition=self._string(data, "condition"),
                children=self._nodes(data, "children", path),
            )

        if kind == "switch":
            cases = []
            for index, entry in enumerate(self._list(data, "switchCases", path)):
                case_path = f"{path}/switchCases[{index}]"
                if not isinstance(entry, dict):
                    raise ParseError(f"{case_path} must be an object")
                cases.append(
                    SwitchCase(
                        label=self._string(entry, "label"),
                        body=self._nodes(entry, "body", case_path),
                    )
                )
            return SwitchNode(condition=self._string(data, "condition"), cases=tuple(cases))

        if kind == "try":
            catches = []
            for index, entry in enumerate(self._list(data, "catches", path)):
                catch_path = f"{path}/catches[{index}]"
                if not isinstance(entry, dict):
                    raise ParseError(f"{catch_path} must be an object")
                catches.append(
                    CatchClause(
                        exception=self._string(entry, "exception"),
                        body=self._nodes(entry, "body", catch_path),
                    )
                )
            finally_branch = None
            if data.get("finallyBranch") is not None:
                finally_branch = self._nodes(data, "finallyBranch", path)
            return TryNode(
                children=self._nodes(data, "children", path),
                catches=tuple(catches),
                finally_branch=finally_branch,
            )

        logger.debug("Keeping unknown node kind %r at %s", kind, path)
        return UnknownNode(
            kind=str(kind) if kind else "unknown",
            text=self._string(data, "text"),
        )

    def _method(self, data: Dict[str, Any], path: str) -> MethodInfo:
        params = []
        for index, entry in enumerate(self._list(data, "params", path)):
            if not isinstance(entry, dict):
                raise ParseError(f"{path}/params[{index}] must be an object")
            params.append(Param(name=self._string(entry, "name"), type=self._string(entry, "type")))

        control_tree = None
        if data.get("controlTree") is not None:
            control_tree = self._node(data["controlTree"], f"{path}/controlTree")

        return MethodInfo(
            name=self._string(data, "name"),
            signature=self._string(data, "signature") or "",
            return_type=self._string(data, "returnType"),
            visibility=self._string(data, "visibility"),
            is_static=bool(data.get("isStatic", False)),
            params=tuple(params),
            control_tree=control_tree,
        )

    def _method_name(self, method: MethodInfo) -> str:
        if method.name:
            return method.name.strip()
        return method_name_from_signature(method.signature)


def parse_control_tree(payload: Payload) -> ControlNode:
    """Parse a control-flow tree from a JSON string or dict."""
    return Parser().parse(payload)


def parse_method(payload: Payload) -> MethodInfo:
    """Parse a method descriptor from a JSON string or dict."""
    return Parser().parse_method(payload)


def find_method(document: Payload, name: str) -> MethodInfo:
    """Find a method in a parser document by "Class.method" or bare name."""
    return Parser().find_method(document, name)


def load_file(path: Union[str, Path], method_name: Optional[str] = None) -> ParseResult:
    """
    Load a control tree, method or parser document from a JSON file.

    Raises:
        ParseError: If the file cannot be read or is malformed.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(f"Cannot read {path}: {e}") from e
    return Parser().load(content, method_name)
