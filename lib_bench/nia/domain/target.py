"""Nia sources a task set needs indexed before the nia condition can run."""

from typing import Literal

from pydantic import BaseModel

from lib_bench.task.domain.task import Task

type TargetKind = Literal["repo", "docs"]


class NiaTarget(BaseModel, frozen=True):
    """A repository (at a tag) or a documentation site to index.

    ``identifier`` is ``owner/repo`` for repositories and a URL for docs.
    """

    kind: TargetKind
    identifier: str
    display_name: str
    tag: str | None = None
    url_patterns: list[str] | None = None
    focus: str | None = None

    def dedupe_key(self) -> tuple[str, str, str]:
        return (self.kind, self.identifier, self.tag or "")


class TargetSelection(BaseModel, frozen=True):
    """Targets for a task set, plus the ``library:major`` keys with no mapping."""

    targets: list[NiaTarget]
    unmapped: list[str]


def _repo(identifier: str, tag: str, display_name: str) -> NiaTarget:
    return NiaTarget(
        kind="repo", identifier=identifier, tag=tag, display_name=display_name
    )


def _docs(url: str, display_name: str) -> NiaTarget:
    return NiaTarget(kind="docs", identifier=url, display_name=display_name)


_REACT_LEGACY_DOCS = _docs("https://legacy.reactjs.org", "React Legacy Docs")
_NEXT_DOCS = _docs("https://nextjs.org/docs", "Next.js Docs")
_AI_DOCS = _docs("https://ai-sdk.dev/docs", "Vercel AI SDK Docs")
_TRPC_DOCS = _docs("https://trpc.io/docs", "tRPC Docs")
_ZOD_DOCS = _docs("https://zod.dev", "Zod Docs")

# Keyed by "<library>:<major version>"; repos are pinned to a release tag.
VERSION_TARGETS: dict[str, list[NiaTarget]] = {
    "react:17": [_repo("facebook/react", "17.0.2", "React v17"), _REACT_LEGACY_DOCS],
    "react:18": [_repo("facebook/react", "18.3.1", "React v18"), _REACT_LEGACY_DOCS],
    "react:19": [
        _repo("facebook/react", "v19.2.4", "React v19"),
        _docs("https://react.dev", "React Docs"),
    ],
    "next:13": [_repo("vercel/next.js", "v13.5.7", "Next.js v13"), _NEXT_DOCS],
    "next:14": [_repo("vercel/next.js", "v14.2.28", "Next.js v14"), _NEXT_DOCS],
    "next:15": [_repo("vercel/next.js", "v15.3.3", "Next.js v15"), _NEXT_DOCS],
    "next:16": [_repo("vercel/next.js", "v16.1.6", "Next.js v16"), _NEXT_DOCS],
    "ai:3": [_repo("vercel/ai", "v3.4.33", "Vercel AI SDK v3"), _AI_DOCS],
    "ai:4": [_repo("vercel/ai", "v4.2.2", "Vercel AI SDK v4"), _AI_DOCS],
    "ai:5": [_repo("vercel/ai", "ai@5.0.129", "Vercel AI SDK v5"), _AI_DOCS],
    "trpc:10": [_repo("trpc/trpc", "v10.45.4", "tRPC v10"), _TRPC_DOCS],
    "trpc:11": [_repo("trpc/trpc", "v11.10.0", "tRPC v11"), _TRPC_DOCS],
    "zod:3": [_repo("colinhacks/zod", "v3.24.4", "Zod v3"), _ZOD_DOCS],
    "zod:4": [_repo("colinhacks/zod", "v4.3.6", "Zod v4"), _ZOD_DOCS],
}


def version_key(task: Task) -> str:
    major = task.target_version.split(".")[0]
    return f"{task.library}:{major}"


def targets_for_tasks(
    tasks: list[Task],
    mapping: dict[str, list[NiaTarget]] | None = None,
) -> TargetSelection:
    """
    Collect the targets for every distinct ``library:major`` in tasks.

    Targets shared between versions (the legacy React docs, say) appear once;
    first-seen order is kept.
    """
    mapping = VERSION_TARGETS if mapping is None else mapping
    keys = list(dict.fromkeys(version_key(task) for task in tasks))

    seen: set[tuple[str, str, str]] = set()
    targets: list[NiaTarget] = []
    unmapped: list[str] = []
    for key in keys:
        if key not in mapping:
            unmapped.append(key)
            continue
        for target in mapping[key]:
            if target.dedupe_key() in seen:
                continue
            seen.add(target.dedupe_key())
            targets.append(target)
    return TargetSelection(targets=targets, unmapped=unmapped)
