from __future__ import annotations

from dependency_injector import containers, providers

from ..core.ports import DefaultTokenGenerator, UTCClock
from ..core.usecases.analyze import AnalyzeUseCase
from ..core.services import (
    AgentPipeline,
    AnalysisOrchestrator,
    CodeSampler,
    JsonExtractor,
    LLMAnalyzer,
    MultiAgentStrategy,
    ReportBuilder,
    SinglePassStrategy,
    StructuredLLM,
)
from ..infra.file_walker import FileWalker
from ..infra.llm import LLM
from ..infra.logging import AnalysisLogger
from ..infra.repository import RepositoryAcquirer
from ..infra.scanners import ScannerRunner, build_scanners
from ..infra.workspace import Workspace


class Container(containers.DeclarativeContainer):
    """DI container; configuration is loaded with ``config.from_pydantic(AppConfig())``."""

    config = providers.Configuration()

    # Logger (Resource: manages lifecycle with init/shutdown)
    logger = providers.Resource(
        AnalysisLogger,
        logs_dir=config.directories.logs_dir,
        log_file=config.logging.log_file,
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    token_gen = providers.Singleton(DefaultTokenGenerator)
    clock = providers.Singleton(UTCClock)

    # Adapters with injected config
    workspace = providers.Singleton(
        Workspace,
        base_dir=config.directories.workspaces_dir,
        token_gen=token_gen,
        logger=logger,
    )

    repo = providers.Singleton(
        RepositoryAcquirer,
        clone_timeout=config.acquisition.clone_timeout_seconds,
        logger=logger,
    )

    file_walker = providers.Singleton(FileWalker)

    scanners = providers.Factory(
        ScannerRunner,
        scanners=providers.Callable(
            build_scanners,
            config.scanners.enabled,
            timeout=config.scanners.timeout_seconds,
        ),
        logger=logger,
    )

    # LLM client: one per request, never cached at module level
    llm = providers.Factory(
        LLM,
        provider=config.llm.provider_name,
        model=config.llm.model_name,
        api_key=config.llm.api_key,
        logger=logger,
        temperature=config.llm.temperature,
        max_output_tokens=config.llm.max_output_tokens,
    )

    # Domain services
    json_extractor = providers.Singleton(JsonExtractor)

    structured_llm = providers.Factory(
        StructuredLLM,
        llm=llm,
        logger=logger,
        json_extractor=json_extractor,
        temperature=config.llm.temperature,
    )

    report_builder = providers.Singleton(ReportBuilder, clock=clock)

    code_sampler = providers.Factory(
        CodeSampler,
        max_files=config.analysis.max_files,
        max_chars=config.analysis.max_file_chars,
        logger=logger,
    )

    agent_pipeline = providers.Factory(
        AgentPipeline,
        structured_llm=structured_llm,
        logger=logger,
    )

    strategy = providers.Selector(
        config.analysis.strategy,
        **{
            "single-pass": providers.Factory(SinglePassStrategy, structured_llm=structured_llm),
            "multi-agent": providers.Factory(
                MultiAgentStrategy,
                pipeline=agent_pipeline,
                report_builder=report_builder,
            ),
        },
    )

    llm_analyzer = providers.Factory(
        LLMAnalyzer,
        strategy=strategy,
        structured_llm=structured_llm,
        report_builder=report_builder,
        logger=logger,
    )

    analysis_orchestrator = providers.Factory(
        AnalysisOrchestrator,
        workspace=workspace,
        repo=repo,
        scanners=scanners,
        file_walker=file_walker,
        code_sampler=code_sampler,
        llm_analyzer=llm_analyzer,
        report_builder=report_builder,
        logger=logger,
    )

    # Use cases
    analyze_uc = providers.Factory(
        AnalyzeUseCase,
        orchestrator=analysis_orchestrator,
    )
