"""Pytest configuration and shared fixtures for StructoFlow tests."""

import pytest

from structoflow import (
    CatchClause,
    IfNode,
    LoopNode,
    MethodInfo,
    Param,
    SequenceNode,
    StatementNode,
    StructogramGenerator,
    SwitchCase,
    SwitchNode,
    TryNode,
)


def stmt(text):
    """Shorthand for a statement node."""
    return StatementNode(text=text)


@pytest.fixture
def simple_tree():
    """Two plain statements."""
    return SequenceNode(children=(stmt("int total = 0;"), stmt("return total;")))


@pytest.fixture
def if_tree():
    """If with both branches."""
    return SequenceNode(
        children=(
            IfNode(
                condition="x > 0",
                then_branch=(stmt("y = 1;"),),
                else_branch=(stmt("y = 2;"), stmt("log(y);")),
            ),
        )
    )


@pytest.fixture
def loop_tree():
    """A pre-test loop followed by a do-while loop."""
    return SequenceNode(
        children=(
            LoopNode(loop_kind="for", condition="int i = 0; i < n; i++", children=(stmt("sum += i;"),)),
            LoopNode(loop_kind="doWhile", condition="i < 10", children=(stmt("i++;"),)),
        )
    )


@pytest.fixture
def switch_tree():
    """Switch where case 1 falls through into case 2."""
    return SequenceNode(
        children=(
            SwitchNode(
                condition="x",
                cases=(
                    SwitchCase(label="1", body=()),
                    SwitchCase(label="2", body=(stmt("doA();"),)),
                    SwitchCase(label="default", body=(stmt("doB();"),)),
                ),
            ),
        )
    )


@pytest.fixture
def try_tree():
    """Try with one catch and a finally section."""
    return SequenceNode(
        children=(
            TryNode(
                children=(stmt("open();"),),
                catches=(CatchClause(exception="IOException e", body=(stmt("log(e);"),)),),
                finally_branch=(stmt("close();"),),
            ),
        )
    )


@pytest.fixture
def complex_tree(if_tree, loop_tree, switch_tree, try_tree):
    """Every construct in one method body."""
    return SequenceNode(
        children=(stmt("int count = 0;"),)
        + if_tree.children
        + loop_tree.children
        + switch_tree.children
        + try_tree.children
        + (stmt("return count;"),)
    )


@pytest.fixture
def method(simple_tree):
    """A method descriptor owning the simple tree."""
    return MethodInfo(
        name="sum",
        signature="sum(int n)",
        return_type="int",
        visibility="+",
        params=(Param(name="n", type="int"),),
        control_tree=simple_tree,
    )


@pytest.fixture
def tree_payload():
    """Analyzer JSON for a small control tree."""
    return {
        "kind": "sequence",
        "children": [
            {"kind": "statement", "text": "int total = 0;"},
            {
                "kind": "if",
                "condition": "total > 0",
                "thenBranch": [{"kind": "statement", "text": "return total;"}],
                "elseBranch": [],
            },
        ],
    }


@pytest.fixture
def document_payload(tree_payload):
    """Analyzer parser document with one class and two methods."""
    return {
        "nodes": [
            {
                "name": "Calculator",
                "methods": [
                    {
                        "name": "total",
                        "signature": "total()",
                        "returnType": "int",
                        "visibility": "public",
                        "controlTree": tree_payload,
                    },
                    {
                        "signature": "reset()",
                        "visibility": "-",
                        "controlTree": {
                            "kind": "sequence",
                            "children": [{"kind": "statement", "text": "total = 0;"}],
                        },
                    },
                ],
            }
        ]
    }


@pytest.fixture
def generator():
    """Default StructogramGenerator instance."""
    return StructogramGenerator()
