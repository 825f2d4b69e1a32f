from __future__ import annotations

from dataclasses import dataclass

from ..config import GuardConfig
from ..core.context import RunContext
from ..core.logging import log_event
from ..core.process import run_command
from ..model import ChangedLineSet
from .parser import merge_changed_lines, parse_unified_diff

# non-ASCII paths stay unquoted so diff headers keep parsing
GIT_OPTIONS = ("-c", "core.quotePath=false")
DIFF_FLAGS = ("--no-color", "--no-ext-diff", "-U3")


@dataclass(frozen=True)
class DiffSource:
    name: str
    args: tuple[str, ...] = ()

    def command(self) -> list[str]:
        return ["git", *GIT_OPTIONS, "diff", *DIFF_FLAGS, *self.args]


def _git(ctx: RunContext, config: GuardConfig, *args: str) -> str | None:
    result = run_command(["git", *args], ctx.repo_root, timeout_seconds=config.git_timeout, ctx=ctx)
    if not result.ok:
        log_event(ctx, "debug", "diff", "git-failed", command=" ".join(["git", *args]), code=result.code)
        return None
    return result.stdout.strip()


def current_branch(ctx: RunContext, config: GuardConfig) -> str | None:
    branch = _git(ctx, config, "rev-parse", "--abbrev-ref", "HEAD")
    if not branch or branch == "HEAD":
        return None
    return branch


def _ref_exists(ctx: RunContext, config: GuardConfig, ref: str) -> bool:
    return _git(ctx, config, "rev-parse", "--verify", "--quiet", ref) is not None


def resolve_comparison_range(ctx: RunContext, config: GuardConfig) -> str | None:
    """``<remote>/<branch>..HEAD`` for the best available base, or ``None`` for staged-only."""
    branch = current_branch(ctx, config)
    if branch and _ref_exists(ctx, config, f"refs/remotes/{config.remote}/{branch}"):
        log_event(ctx, "debug", "diff", "range-upstream", base=f"{config.remote}/{branch}")
        return f"{config.remote}/{branch}..HEAD"
    for base in config.base_branches:
        if _ref_exists(ctx, config, f"refs/remotes/{config.remote}/{base}"):
            log_event(ctx, "debug", "diff", "range-base-branch", base=f"{config.remote}/{base}")
            return f"{config.remote}/{base}..HEAD"
    log_event(ctx, "debug", "diff", "range-staged-only")
    return None


def diff_sources(ctx: RunContext, config: GuardConfig) -> list[DiffSource]:
    sources: list[DiffSource] = []
    comparison = resolve_comparison_range(ctx, config)
    if comparison:
        sources.append(DiffSource("branch", (comparison,)))
    sources.append(DiffSource("staged", ("--staged",)))
    sources.append(DiffSource("unstaged"))
    return sources


def read_source(ctx: RunContext, source: DiffSource, config: GuardConfig) -> ChangedLineSet:
    result = run_command(source.command(), ctx.repo_root, timeout_seconds=config.git_timeout, ctx=ctx)
    if not result.ok:
        log_event(
            ctx,
            "debug",
            "diff",
            "source-failed",
            source=source.name,
            code=result.code,
            stderr=result.stderr.strip(),
        )
        return ChangedLineSet()
    changed = parse_unified_diff(result.stdout, config.context_margin)
    log_event(ctx, "debug", "diff", "source-parsed", source=source.name, files=len(changed.lines))
    return changed


def collect_changed_lines(ctx: RunContext, config: GuardConfig) -> ChangedLineSet:
    """Union of every diff source; failures count as "no changes" for that source."""
    parsed = [read_source(ctx, source, config) for source in diff_sources(ctx, config)]
    changed = merge_changed_lines(*parsed)
    log_event(
        ctx,
        "info",
        "diff",
        "collected",
        files=len(changed.lines),
        added_declarations=changed.added_declaration_count,
    )
    return changed
