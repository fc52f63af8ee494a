"""Identifier space for generated spikes.

Generated spike ids encode ``{prefix}{library}-{pattern}-{style}-{language}``.
The space is the Cartesian product of the dimension lists below and is never
materialized; enumeration is lazy and can be capped.
"""

from __future__ import annotations

from itertools import islice, product
from typing import Iterable, Iterator, NamedTuple, Sequence

from spike_studio.config.constants import GEN_PREFIX, GENERATED_PREFIXES, STRIKE_PREFIX
from spike_studio.exceptions import MalformedIdentifierError, UnknownIdentifierError

LIBRARIES: tuple[str, ...] = (
    # UI frameworks and meta-frameworks
    "react", "vue", "svelte", "angular", "solid", "qwik", "nextjs", "nuxt", "remix", "astro",
    "expo", "reactflow", "shadcn-tree-view",
    # HTTP servers
    "express", "fastify", "koa", "hapi", "nestjs", "deno-fresh", "bun-elysia", "elysia", "hono",
    "fastapi", "flask", "django", "sails", "adonis", "feathers",
    # API layers
    "graphql", "apollo", "urql", "relay", "graphql-yoga", "openapi", "swagger", "trpc",
    # Data
    "prisma", "mongoose", "sequelize", "typeorm", "drizzle", "knex", "postgres", "mysql",
    "sqlite", "neo4j", "redis", "supabase",
    # Messaging
    "bullmq", "kafka", "rabbitmq", "nats", "sqs", "sns", "pubsub", "kinesis", "activemq",
    # Tooling
    "jest", "vitest", "playwright", "cypress", "eslint", "prettier", "rollup", "vite",
    "webpack", "tsup", "github-actions",
    # Infrastructure
    "docker", "kubernetes", "helm", "terraform", "pulumi", "ansible", "serverless",
    "aws-lambda", "gcp-cloud-functions", "azure-functions",
    # Auth
    "auth0", "passport", "next-auth", "keycloak", "firebase-auth", "cognito", "supabase-auth",
    "clerk", "lucia", "ory",
    # AI
    "openai", "anthropic", "langchain", "llamaindex", "transformers", "whisper", "groq",
    "mistral", "cohere", "weaviate", "pinecone", "milvus", "qdrant",
    # Payments
    "stripe", "paddle", "paypal", "braintree",
    # Search
    "elasticsearch", "opensearch", "meilisearch", "typesense", "algolia",
    # Storage
    "s3", "gcs", "azure-blob", "minio", "cloudinary", "uploadthing",
    # Monitoring and logging
    "sentry", "posthog", "datadog", "newrelic", "prometheus", "pino", "winston", "segment",
    # Content, i18n, messaging platforms
    "strapi", "contentful", "sanity", "ghost", "i18next", "next-intl", "line",
)

PATTERNS: tuple[str, ...] = (
    "minimal", "init", "config", "route", "controller", "service", "client", "crud",
    "webhook", "job", "worker", "listener", "plugin", "middleware", "component", "hook",
    "adapter", "schema", "example",
)

STYLES: tuple[str, ...] = ("basic", "typed", "advanced", "secure", "testing")

LANGUAGES: tuple[str, ...] = ("ts", "js", "py", "go", "rs", "kt")

LANGUAGE_NAMES: dict[str, str] = {
    "ts": "typescript",
    "js": "javascript",
    "py": "python",
    "go": "go",
    "rs": "rust",
    "kt": "kotlin",
}

PREFIX_CHOICES: dict[str, tuple[str, ...]] = {
    "strike": (STRIKE_PREFIX,),
    "gen": (GEN_PREFIX,),
    "any": GENERATED_PREFIXES,
}


class SpikeTuple(NamedTuple):
    """The four dimensions a generated id decodes to."""

    library: str
    pattern: str
    style: str
    language: str


def split_prefix(spike_id: str) -> tuple[str, str]:
    """Split a generated id into ``(prefix, remainder)``.

    Raises:
        UnknownIdentifierError: If the id carries no generated prefix.
    """
    for prefix in GENERATED_PREFIXES:
        if spike_id.startswith(prefix):
            return prefix, spike_id[len(prefix) :]
    raise UnknownIdentifierError(f"Not a generated spike id: {spike_id}")


def encode(parts: SpikeTuple | Sequence[str], prefix: str = STRIKE_PREFIX) -> str:
    """Build the id for a dimension tuple."""
    library, pattern, style, language = parts
    return f"{prefix}{library}-{pattern}-{style}-{language}"


def decode(spike_id: str) -> SpikeTuple:
    """Recover the dimension tuple from a generated id.

    The last three hyphen-delimited segments are pattern, style and language;
    everything before them is the library, which may itself contain hyphens.

    Raises:
        UnknownIdentifierError: If the id carries no generated prefix.
        MalformedIdentifierError: If fewer than four segments remain.
    """
    _, remainder = split_prefix(spike_id)
    parts = remainder.split("-")
    if len(parts) < 4 or not all(parts[-3:]) or not all(parts[:-3]):
        raise MalformedIdentifierError(
            f"Invalid generated spike id: {spike_id}",
            details="expected {library}-{pattern}-{style}-{language}",
        )
    return SpikeTuple("-".join(parts[:-3]), parts[-3], parts[-2], parts[-1])


def is_generated_id(spike_id: str) -> bool:
    """Prefix-only membership test; does not validate the tuple."""
    return spike_id.startswith(GENERATED_PREFIXES)


class IdentifierSpace:
    """Lazy view over every generated spike id.

    Args:
        libraries, patterns, styles, languages: Dimension lists.
        prefixes: Brand prefixes; each tuple yields one id per prefix.
    """

    def __init__(
        self,
        libraries: Sequence[str] = LIBRARIES,
        patterns: Sequence[str] = PATTERNS,
        styles: Sequence[str] = STYLES,
        languages: Sequence[str] = LANGUAGES,
        prefixes: Sequence[str] = GENERATED_PREFIXES,
    ):
        self.libraries = tuple(libraries)
        self.patterns = tuple(patterns)
        self.styles = tuple(styles)
        self.languages = tuple(languages)
        self.prefixes = tuple(prefixes)

    def __len__(self) -> int:
        return (
            len(self.libraries)
            * len(self.patterns)
            * len(self.styles)
            * len(self.languages)
            * len(self.prefixes)
        )

    def __iter__(self) -> Iterator[str]:
        return self.enumerate()

    def __contains__(self, spike_id: object) -> bool:
        return isinstance(spike_id, str) and self.belongs_to(spike_id)

    def belongs_to(self, spike_id: str) -> bool:
        """Recognize an id by prefix alone."""
        return spike_id.startswith(self.prefixes)

    def tuples(self) -> Iterator[SpikeTuple]:
        for combo in product(self.libraries, self.patterns, self.styles, self.languages):
            yield SpikeTuple(*combo)

    def enumerate(self, limit: int | None = None) -> Iterator[str]:
        """Yield ids over the product, optionally truncated at ``limit``.

        Each call returns a fresh iterator.
        """
        ids = (encode(t, prefix) for t in self.tuples() for prefix in self.prefixes)
        if limit is not None:
            return islice(ids, max(0, limit))
        return ids

    def narrowed_to(self, tokens: Iterable[str]) -> "IdentifierSpace":
        """Sub-space restricted to the dimension values named by ``tokens``.

        A hyphenated value also matches when every segment is a token. Dimensions
        that no token names stay unrestricted.
        """
        words = set(tokens)
        return IdentifierSpace(
            _mentioned(self.libraries, words),
            _mentioned(self.patterns, words),
            _mentioned(self.styles, words),
            _mentioned(self.languages, words),
            self.prefixes,
        )

    def enumerate_filtered(
        self,
        libs: Iterable[str] | None = None,
        patterns: Iterable[str] | None = None,
        styles: Iterable[str] | None = None,
        langs: Iterable[str] | None = None,
        prefix: str = "any",
        limit: int | None = None,
    ) -> Iterator[str]:
        """Yield ids restricted per dimension and prefix brand.

        Empty or missing filters leave a dimension unrestricted; filter values
        outside the dimension lists are ignored.
        """
        prefixes = PREFIX_CHOICES.get(prefix)
        if prefixes is None:
            raise ValueError(f"Unknown prefix choice: {prefix}")
        narrowed = IdentifierSpace(
            _narrow(self.libraries, libs),
            _narrow(self.patterns, patterns),
            _narrow(self.styles, styles),
            _narrow(self.languages, langs),
            [p for p in self.prefixes if p in prefixes],
        )
        return narrowed.enumerate(limit)


def _narrow(dimension: tuple[str, ...], wanted: Iterable[str] | None) -> tuple[str, ...]:
    if not wanted:
        return dimension
    keep = set(wanted)
    return tuple(v for v in dimension if v in keep)


def _mentioned(dimension: tuple[str, ...], words: set[str]) -> tuple[str, ...]:
    hits = tuple(v for v in dimension if v in words or words.issuperset(v.split("-")))
    return hits or dimension
