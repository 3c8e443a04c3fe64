from __future__ import annotations

import json
from typing import Any, Iterable, Sequence

from .models import CodeFile, ScannerIssue


ISSUE_SHAPE = (
    "{\n"
    "  \"category\": \"security|performance|quality|frontend|compliance|architecture\",\n"
    "  \"severity\": \"critical|high|medium|low\",\n"
    "  \"title\": string,\n"
    "  \"description\": string,\n"
    "  \"files_affected\": [string],\n"
    "  \"line_ranges\": [[start, end]],\n"
    "  \"impact\": string,\n"
    "  \"recommendation\": string,\n"
    "  \"cursor_prompt\": string  // copy-pasteable fix instruction for an AI code editor\n"
    "}"
)


MASTER_SYSTEM_PROMPT = (
    "You are VibeCheckr, a code auditor that reviews repositories for security, quality, "
    "performance, architecture and compliance problems.\n\n"
    "# Analysis phases\n"
    "1. Security: vulnerabilities, exposed secrets, authentication and authorization flaws\n"
    "2. Architecture: structure, dependencies, design patterns\n"
    "3. Performance: bottlenecks, inefficient operations, resource usage\n"
    "4. Quality: maintainability, test coverage, complexity\n"
    "5. Frontend: bundle size, loading performance, caching (if applicable)\n"
    "6. SEO and accessibility: meta tags, semantic HTML (if applicable)\n"
    "7. Compliance: licensing, PII handling\n"
    "8. Deployment readiness: configuration and environment handling\n\n"
    "# Scoring rubric\n"
    "90-100 production-ready; 70-89 good with minor improvements; 50-69 moderate issues; "
    "30-49 significant problems; 0-29 critical risks.\n"
    "Weights: security 40%, performance and architecture 25%, quality and testing 20%, "
    "compliance and SEO 15%.\n\n"
    "# Instructions\n"
    "- Detect the project type (backend, frontend, fullstack, mobile, library, other).\n"
    "- Adjust category coverage to the project type and note skipped categories.\n"
    "- Focus on security-sensitive code and critical business logic.\n\n"
    "# Output\n"
    "Return ONLY a JSON object, no markdown and no text outside it:\n"
    "{\n"
    "  \"score\": 0-100,\n"
    "  \"project_type\": \"backend|frontend|fullstack|mobile|library|other\",\n"
    "  \"summary\": \"2-3 sentence overview\",\n"
    f"  \"critical_issues\": [{ISSUE_SHAPE}],\n"
    "  \"categories_analyzed\": [{\"name\": string, \"score\": 0-100, \"issues_found\": int, \"top_concern\": string}],\n"
    "  \"positive_findings\": [string],\n"
    "  \"next_steps\": [string]\n"
    "}\n"
)


TRUNCATION_MARKER = "\n\n[Content truncated - file too large]"


def format_code_block(files: Sequence[CodeFile]) -> str:
    """Render sampled files the way every prompt embeds them."""
    return "\n\n---\n\n".join(f"File: {f.path}\nContent:\n{f.content}" for f in files)


def build_single_pass_message(files: Sequence[CodeFile]) -> str:
    return (
        "Analyze these code files for a comprehensive repository audit:\n\n"
        f"{format_code_block(files)}\n\n"
        "Provide a complete analysis including:\n"
        "1. Overall score and critical issues\n"
        "2. Project type classification\n"
        "3. Category breakdown (security, performance, quality, etc.)\n"
        "4. Positive findings\n"
        "5. Prioritized next steps\n\n"
        "Focus on the most critical findings and provide actionable insights."
    )


def build_scanner_summary_message(files: Sequence[CodeFile], issues: Iterable[ScannerIssue]) -> str:
    findings = json.dumps([issue.to_dict() for issue in issues], indent=2, ensure_ascii=False)
    body = (
        "Static analysis tools (Semgrep, Gitleaks, ESLint) reported the findings below for this repository.\n"
        "Summarize them for the repository owner: explain the overall risk, group related findings, "
        "and list prioritized next steps. Add critical_issues only for problems the tools missed "
        "or that need a combined fix.\n\n"
        f"--- SCANNER FINDINGS (JSON) ---\n{findings}\n"
    )
    if files:
        body += f"\n--- CODE SAMPLE ---\n{format_code_block(files)}\n"
    return body


def build_json_fix_prompt(original_request: str, invalid_reply: str, problem: str) -> str:
    return (
        "Your previous response was not valid JSON in the required format "
        f"({problem}). Return ONLY valid JSON in the exact format specified.\n\n"
        f"--- ORIGINAL REQUEST ---\n{original_request}\n\n"
        f"--- YOUR PREVIOUS RESPONSE ---\n{invalid_reply}\n\n"
        "Provide ONLY the JSON object, no other text or explanations."
    )


# Multi-agent stage prompts. Templates use string.Template placeholders:
# $code is the sampled code block, any other $name is the JSON output of
# the stage with that name.

AGENT_SYSTEM_PROMPT = (
    "You are one specialist in a team of code auditors reviewing a repository. "
    "Stay within your specialty, cite files and line ranges, and return ONLY a JSON object "
    "with no markdown and no text outside it."
)

CONTEXT_TEMPLATE = (
    "You are the CONTEXT agent. Build a shared understanding of this repository for the "
    "specialists that run after you.\n\n"
    "$code\n\n"
    "Return JSON:\n"
    "{\n"
    "  \"project_type\": \"backend|frontend|fullstack|mobile|library|other\",\n"
    "  \"languages\": [string],\n"
    "  \"frameworks\": [string],\n"
    "  \"architecture\": string,\n"
    "  \"entry_points\": [string],\n"
    "  \"sensitive_areas\": [string],\n"
    "  \"summary\": string\n"
    "}"
)

_SPECIALIST_REPLY = (
    "Return JSON:\n"
    "{\n"
    "  \"score\": 0-100,\n"
    "  \"summary\": string,\n"
    f"  \"issues\": [{ISSUE_SHAPE}],\n"
    "  \"positive_findings\": [string]\n"
    "}"
)

SECURITY_TEMPLATE = (
    "You are the SECURITY agent. Look for injection, broken authentication or authorization, "
    "hardcoded secrets, insecure dependencies, missing input validation and unsafe configuration.\n\n"
    "--- REPOSITORY CONTEXT ---\n$context\n\n"
    "--- CODE ---\n$code\n\n"
    + _SPECIALIST_REPLY
)

PERFORMANCE_TEMPLATE = (
    "You are the PERFORMANCE agent. Look for blocking I/O on hot paths, N+1 queries, unbounded "
    "loops or memory growth, missing caching and wasteful network usage.\n\n"
    "--- REPOSITORY CONTEXT ---\n$context\n\n"
    "--- CODE ---\n$code\n\n"
    + _SPECIALIST_REPLY
)

QUALITY_TEMPLATE = (
    "You are the QUALITY agent. Assess structure, naming, duplication, complexity, error "
    "handling and testability.\n\n"
    "--- REPOSITORY CONTEXT ---\n$context\n\n"
    "--- CODE ---\n$code\n\n"
    + _SPECIALIST_REPLY
)

FRONTEND_TEMPLATE = (
    "You are the FRONTEND agent. Assess UI code for bundle size, rendering performance, "
    "accessibility, SEO and state management. If the repository has no frontend, return "
    "score 100, an empty issues list and say so in the summary.\n\n"
    "--- REPOSITORY CONTEXT ---\n$context\n\n"
    "--- CODE ---\n$code\n\n"
    + _SPECIALIST_REPLY
)

AGGREGATION_TEMPLATE = (
    "You are the AGGREGATION agent. Combine the specialist reports below into one final "
    "audit. Deduplicate issues, resolve conflicting recommendations and weight security 40%, "
    "performance 25%, quality 20%, frontend 15%.\n\n"
    "--- CONTEXT ---\n$context\n\n"
    "--- SECURITY ---\n$security\n\n"
    "--- PERFORMANCE ---\n$performance\n\n"
    "--- QUALITY ---\n$quality\n\n"
    "--- FRONTEND ---\n$frontend\n\n"
    "Return JSON:\n"
    "{\n"
    "  \"overall_score\": 0-100,\n"
    "  \"methodology\": string,\n"
    "  \"summary\": string,\n"
    f"  \"critical_issues\": [{ISSUE_SHAPE}],\n"
    "  \"category_scores\": {\"security\": 0-100, \"performance\": 0-100, \"quality\": 0-100, \"frontend\": 0-100},\n"
    "  \"cross_cutting_insights\": [string],\n"
    "  \"specialist_agreement\": {\"conflicting_recommendations\": [string], \"reinforcing_findings\": [string]},\n"
    "  \"next_steps\": [string]\n"
    "}"
)


def dump_stage_output(result: Any) -> str:
    return json.dumps(result, indent=2, ensure_ascii=False)
