"""
Layout tracing for structoflow.

A LayoutTrace collects what the generator did during one call: a snapshot
per pipeline stage and one LayoutDecision per layout node the builder
produced (or dropped). Enable it with StructogramGenerator(debug=True).

Typical uses are finding out why a box has its width, checking that an
empty statement was dropped rather than drawn, and asserting on single
layout decisions in tests.

Usage:
    >>> generator = StructogramGenerator(debug=True)
    >>> layout = generator.layout(tree)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("layout_trace.txt")

Decision reasons include "statement", "dropped_statement",
"empty_placeholder", "no_else", "switch_group" and one per compound kind.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

RULE_WIDTH = 60
MAX_VALUE_LENGTH = 100


def _shorten(value: Any) -> str:
    text = str(value)
    if len(text) > MAX_VALUE_LENGTH:
        return text[:MAX_VALUE_LENGTH] + "..."
    return text


def _banner(title: str) -> List[str]:
    return ["=" * RULE_WIDTH, title, "=" * RULE_WIDTH]


@dataclass
class LayoutDecision:
    """
    One node produced (or dropped) by the layout builder.

    Attributes:
        path: Position in the control-flow tree, e.g. "root/2/then/0" or
              "root/0/case[1]".
        kind: Kind of the produced layout node, or of the source node when
              it was dropped.
        width: Width of the produced node (0 when dropped).
        height: Height of the produced node (0 when dropped).
        reason: Why the node was produced.
        detail: Label text or other free-form detail.
    """

    path: str
    kind: str
    width: int
    height: int
    reason: str
    detail: str = ""

    def __str__(self) -> str:
        text = f"{self.path}: {self.kind} {self.width}x{self.height} [{self.reason}]"
        if self.detail:
            text += f" {self.detail!r}"
        return text


@dataclass
class PipelineStage:
    """
    Data recorded when a pipeline stage (parse, layout, render) finished.

    Attributes:
        name: Stage name.
        data: Values worth inspecting after the stage, such as sizes.
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        entries = [f"  {key}: {_shorten(value)}" for key, value in self.data.items()]
        return "\n".join([f"=== Stage: {self.name} ==="] + entries)


@dataclass
class LayoutTrace:
    """
    Everything recorded during one generator call.

    Attributes:
        stages: Stage snapshots in pipeline order.
        decisions: Layout decisions in the order they were made, so
            children come before their parents.
    """

    stages: List[PipelineStage] = field(default_factory=list)
    decisions: List[LayoutDecision] = field(default_factory=list)

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        self.stages.append(PipelineStage(name, dict(data)))

    def add_decision(
        self,
        path: str,
        kind: str,
        width: int,
        height: int,
        reason: str,
        detail: str = "",
    ) -> None:
        self.decisions.append(
            LayoutDecision(path, kind, width, height, reason, detail)
        )

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Snapshot of the named stage, or None if it did not run."""
        return next((stage for stage in self.stages if stage.name == name), None)

    def get_decision_at(self, path: str) -> Optional[LayoutDecision]:
        """Last decision recorded for a tree path."""
        matches = [d for d in self.decisions if d.path == path]
        return matches[-1] if matches else None

    def get_decisions_by_kind(self, kind: str) -> List[LayoutDecision]:
        return [d for d in self.decisions if d.kind == kind]

    def get_decisions_by_reason(self, reason_substring: str) -> List[LayoutDecision]:
        """Decisions whose reason contains the substring."""
        return [d for d in self.decisions if reason_substring in d.reason]

    def summary(self) -> str:
        """Stage names and decision counts per reason, most frequent first."""
        lines = _banner("LAYOUT TRACE SUMMARY")
        lines.append("")
        lines.append(f"Pipeline stages: {len(self.stages)}")
        lines.extend(f"  - {stage.name}" for stage in self.stages)
        lines.append("")
        lines.append(f"Total layout decisions: {len(self.decisions)}")
        lines.append("")
        lines.append("Decisions by reason:")
        counts = Counter(d.reason for d in self.decisions)
        lines.extend(f"  {reason}: {count}" for reason, count in counts.most_common())
        return "\n".join(lines)

    def dump(self) -> str:
        """The summary followed by every stage and every decision."""
        lines = [self.summary(), ""] + _banner("DETAILED TRACE") + [""]
        lines.extend(["Stages:", "-" * 40])
        for stage in self.stages:
            lines.extend([str(stage), ""])
        lines.extend(["Decisions:", "-" * 40])
        lines.extend(str(d) for d in self.decisions)
        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write dump() to a UTF-8 text file."""
        Path(filename).write_text(self.dump(), encoding="utf-8")
