"""FastMCP server exposing vault note search as prompt context."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path
from typing import Any, TypeVar, cast

from dotenv import load_dotenv
from fastmcp import FastMCP
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from .corpus import VaultDocumentSource, load_corpus
from .locale_rules import DEFAULT_RULES, LocaleRules, load_locale_rules
from .paths import Vault, list_vault_names, parse_vault_paths, resolve_search_root
from .prompt import DEFAULT_SYSTEM_PROMPT, build_system_message
from .search import DEFAULT_MAX_RESULTS, DEFAULT_THRESHOLD, NoteSearch, ScoredResult, SearchConfig
from .security import HEALTH_PATH, build_security_middleware

TToolFunc = TypeVar("TToolFunc", bound=Callable[..., Any])

MAX_RESULTS_RANGE = (1, 10)
THRESHOLD_RANGE = (0.0, 1.0)

load_dotenv()


class SettingsError(ValueError):
    """Raised when an environment setting cannot be parsed."""


@dataclass(slots=True)
class Settings:
    vaults: Mapping[str, Vault]
    host: str
    port: int
    shared_secret: str | None
    log_level: str
    search: SearchConfig = field(default_factory=SearchConfig)
    rules: LocaleRules = DEFAULT_RULES
    system_prompt: str = DEFAULT_SYSTEM_PROMPT


def clamp_search_config(max_results: int, threshold: float) -> SearchConfig:
    """Build a :class:`SearchConfig` with both limits forced into their allowed range."""

    low, high = MAX_RESULTS_RANGE
    max_results = min(max(int(max_results), low), high)
    floor, ceiling = THRESHOLD_RANGE
    threshold = min(max(float(threshold), floor), ceiling)
    return SearchConfig(max_result_count=max_results, score_threshold=threshold)


def _env_number(name: str, default: str, kind: Callable[[str], Any]) -> Any:
    raw = os.environ.get(name, default)
    try:
        return kind(raw)
    except ValueError:
        raise SettingsError(f"{name} must be a number, got {raw!r}") from None


@dataclass(slots=True)
class NoteSearchService:
    """Business logic behind the search tools."""

    vaults: Mapping[str, Vault]
    engine: NoteSearch = field(default_factory=NoteSearch)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT

    def list_available_vaults(self) -> dict[str, list[str]]:
        return {"vaults": list_vault_names(self.vaults.values())}

    def _run(
        self,
        query: str,
        root: str | None,
        max_results: int | None = None,
        threshold: float | None = None,
    ) -> list[ScoredResult]:
        search_root = resolve_search_root(root, self.vaults)
        config = self.engine.config
        if max_results is not None or threshold is not None:
            config = clamp_search_config(
                config.max_result_count if max_results is None else max_results,
                config.score_threshold if threshold is None else threshold,
            )
        engine = replace(self.engine, config=config)
        corpus = load_corpus(VaultDocumentSource(search_root))
        return engine.search(query, corpus)

    def search_notes(
        self,
        query: str,
        root: str | None = None,
        max_results: int | None = None,
        threshold: float | None = None,
    ) -> dict[str, Any]:
        try:
            results = self._run(query, root, max_results, threshold)
        except Exception as exc:
            return {"ok": False, "error": str(exc)}
        return {
            "ok": True,
            "results": [
                {"id": r.source_id, "score": round(r.score, 4), "excerpt": r.excerpt}
                for r in results
            ],
            "context": self.engine.format_context(results),
        }

    def build_context(self, query: str, root: str | None = None) -> dict[str, Any]:
        try:
            results = self._run(query, root)
        except Exception as exc:
            return {"ok": False, "error": str(exc)}
        context = self.engine.format_context(results)
        return {
            "ok": True,
            "sources": [r.source_id for r in results],
            "system_message": build_system_message(self.system_prompt, context),
        }


def load_settings() -> Settings:
    """Load configuration from environment variables."""

    raw_vaults = os.environ.get("VAULT_PATHS", "")
    vaults = parse_vault_paths(raw_vaults)

    host = os.environ.get("HOST", "0.0.0.0")  # noqa: S104 (intentional bind)
    port = _env_number("PORT", "8000", int)
    shared_secret = os.environ.get("MCP_SHARED_SECRET")

    log_level = os.environ.get("LOG_LEVEL", "info").upper()
    logging.basicConfig(level=getattr(logging, log_level, logging.INFO))

    search = clamp_search_config(
        _env_number("MAX_CONTEXT_NOTES", str(DEFAULT_MAX_RESULTS), int),
        _env_number("SEARCH_THRESHOLD", str(DEFAULT_THRESHOLD), float),
    )

    rules_path = os.environ.get("LOCALE_RULES_PATH")
    rules = load_locale_rules(Path(rules_path).expanduser()) if rules_path else DEFAULT_RULES

    return Settings(
        vaults=vaults,
        host=host,
        port=port,
        shared_secret=shared_secret,
        log_level=log_level,
        search=search,
        rules=rules,
        system_prompt=os.environ.get("SYSTEM_PROMPT") or DEFAULT_SYSTEM_PROMPT,
    )


def build_service(settings: Settings) -> NoteSearchService:
    engine = NoteSearch(config=settings.search, rules=settings.rules, today=date.today)
    return NoteSearchService(settings.vaults, engine, settings.system_prompt)


def create_server(settings: Settings | None = None) -> tuple[FastMCP, list[Middleware]]:
    """Create a configured :class:`FastMCP` instance and its security middleware."""

    settings = settings or load_settings()
    server = FastMCP(
        "Obsidian Context",
        instructions="Searches Obsidian notes and returns excerpts to use as context",
    )

    security_middleware = build_security_middleware(settings.shared_secret)

    service = build_service(settings)

    def tool(*args: Any, **kwargs: Any) -> Callable[[TToolFunc], TToolFunc]:
        decorator = server.tool(*args, **kwargs)
        return cast(Callable[[TToolFunc], TToolFunc], decorator)

    @tool()
    async def list_available_vaults() -> dict[str, list[str]]:
        return service.list_available_vaults()

    @tool()
    async def search_notes(
        query: str,
        root: str | None = None,
        max_results: int | None = None,
        threshold: float | None = None,
    ) -> dict[str, Any]:
        return service.search_notes(query, root, max_results, threshold)

    @tool()
    async def build_context(query: str, root: str | None = None) -> dict[str, Any]:
        return service.build_context(query, root)

    @server.custom_route(HEALTH_PATH, methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return cast(FastMCP, server), security_middleware


def main() -> None:
    """Run the FastMCP server."""

    settings = load_settings()
    server, security_middleware = create_server(settings)
    server.run(
        transport="http",
        host=settings.host,
        port=settings.port,
        middleware=security_middleware,
    )


if __name__ == "__main__":
    main()
