from __future__ import annotations

from dataclasses import dataclass
from string import Template
from typing import Any, Mapping, Sequence

from pydantic import BaseModel

from ..domain.exceptions import ConfigurationError
from ..domain.models import CodeFile
from ..domain.prompt import (
    AGENT_SYSTEM_PROMPT,
    AGGREGATION_TEMPLATE,
    CONTEXT_TEMPLATE,
    FRONTEND_TEMPLATE,
    PERFORMANCE_TEMPLATE,
    QUALITY_TEMPLATE,
    SECURITY_TEMPLATE,
    dump_stage_output,
    format_code_block,
)
from ..domain.schemas import AggregateReport, ContextFindings, SpecialistFindings
from ..ports import LoggerPort
from .structured_llm import StructuredLLM


@dataclass(frozen=True)
class AgentStage:
    """One step of the sequential prompt chain.

    ``template`` is a string.Template; ``$code`` is replaced with the sampled
    files when ``uses_code`` is set and every name in ``depends_on`` with
    that stage's JSON output.
    """
    name: str
    template: str
    expect: type[BaseModel]
    depends_on: tuple[str, ...] = ()
    uses_code: bool = True
    system_prompt: str = AGENT_SYSTEM_PROMPT


DEFAULT_STAGES: tuple[AgentStage, ...] = (
    AgentStage(name="context", template=CONTEXT_TEMPLATE, expect=ContextFindings),
    AgentStage(name="security", template=SECURITY_TEMPLATE, expect=SpecialistFindings, depends_on=("context",)),
    AgentStage(name="performance", template=PERFORMANCE_TEMPLATE, expect=SpecialistFindings, depends_on=("context",)),
    AgentStage(name="quality", template=QUALITY_TEMPLATE, expect=SpecialistFindings, depends_on=("context",)),
    AgentStage(name="frontend", template=FRONTEND_TEMPLATE, expect=SpecialistFindings, depends_on=("context",)),
    AgentStage(
        name="aggregation",
        template=AGGREGATION_TEMPLATE,
        expect=AggregateReport,
        depends_on=("context", "security", "performance", "quality", "frontend"),
        uses_code=False,
    ),
)


def build_stage_prompt(stage: AgentStage, *, code_block: str, results: Mapping[str, Any]) -> str:
    """Substitute code and dependency outputs into a stage template.

    Raises:
        KeyError: If a dependency has no result yet or the template names an
            unknown placeholder
    """
    values = {dep: dump_stage_output(results[dep]) for dep in stage.depends_on}
    if stage.uses_code:
        values["code"] = code_block
    return Template(stage.template).substitute(values)


def degraded_stage_result(stage: str, error: str) -> dict[str, Any]:
    return {
        "stage": stage,
        "status": "degraded",
        "score": 50,
        "summary": f"{stage} analysis unavailable",
        "issues": [],
        "error": error,
    }


@dataclass
class PipelineResult:
    final: dict[str, Any]
    stages: dict[str, dict[str, Any]]


class AgentPipeline:
    """Runs stages strictly in order; each waits for its dependencies' JSON."""

    def __init__(
        self,
        *,
        structured_llm: StructuredLLM,
        logger: LoggerPort,
        stages: Sequence[AgentStage] = DEFAULT_STAGES,
    ) -> None:
        _check_order(stages)
        self._llm = structured_llm
        self._logger = logger
        self._stages = tuple(stages)

    @property
    def stages(self) -> tuple[AgentStage, ...]:
        return self._stages

    def run(self, files: Sequence[CodeFile]) -> PipelineResult:
        """Run every stage and return the final stage's output plus all others.

        A failing non-final stage is replaced by a degraded object so later
        prompts can still be built. ConfigurationError and any failure of the
        final stage propagate.
        """
        code_block = format_code_block(files)
        results: dict[str, dict[str, Any]] = {}
        last = self._stages[-1]

        for index, stage in enumerate(self._stages, 1):
            prompt = build_stage_prompt(stage, code_block=code_block, results=results)
            self._logger.info(
                "agent_stage_start",
                type="agent_stage_start",
                stage=stage.name,
                position=index,
                total=len(self._stages),
                prompt_len=len(prompt),
            )
            try:
                results[stage.name] = self._llm.request(
                    stage=stage.name,
                    system=stage.system_prompt,
                    user=prompt,
                    expect=stage.expect,
                )
            except ConfigurationError:
                raise
            except Exception as e:
                if stage is last:
                    raise
                self._logger.error(
                    "agent_stage_degraded",
                    exc_info=True,
                    type="agent_stage_degraded",
                    stage=stage.name,
                    error=str(e),
                )
                results[stage.name] = degraded_stage_result(stage.name, str(e))

        final = results.pop(last.name)
        return PipelineResult(final=final, stages=results)


def _check_order(stages: Sequence[AgentStage]) -> None:
    if not stages:
        raise ValueError("pipeline needs at least one stage")
    seen: set[str] = set()
    for stage in stages:
        missing = [dep for dep in stage.depends_on if dep not in seen]
        if missing:
            raise ValueError(f"stage {stage.name!r} depends on {missing} which do not run before it")
        seen.add(stage.name)
