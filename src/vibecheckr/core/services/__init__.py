from __future__ import annotations

from .json_extractor import JsonExtractor, JsonExtractError
from .structured_llm import StructuredLLM
from .code_sampler import CodeSampler
from .agent_pipeline import AgentPipeline, AgentStage, DEFAULT_STAGES, PipelineResult, build_stage_prompt
from .report_builder import ReportBuilder
from .llm_analyzer import LLMAnalyzer, MultiAgentStrategy, SinglePassStrategy
from .analysis_orchestrator import AnalysisOrchestrator

__all__ = [
    "JsonExtractor",
    "JsonExtractError",
    "StructuredLLM",
    "CodeSampler",
    "AgentPipeline",
    "AgentStage",
    "DEFAULT_STAGES",
    "PipelineResult",
    "build_stage_prompt",
    "ReportBuilder",
    "LLMAnalyzer",
    "MultiAgentStrategy",
    "SinglePassStrategy",
    "AnalysisOrchestrator",
]
