"""Specialization rules for generated spikes.

Every generated spike starts from the same base file set. Rules then layer
extra files on top: each rule pairs a predicate over the decoded tuple with a
builder returning the files it contributes. Rules are evaluated in
registration order, may all match the same tuple, and only ever add files.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from spike_studio.spikes.identifiers import SpikeTuple
from spike_studio.spikes.models import SpikeFile

Predicate = Callable[[SpikeTuple], bool]
Builder = Callable[[SpikeTuple], list[SpikeFile]]


@dataclass(frozen=True)
class SpecializationRule:
    """A guarded ``tuple -> additional files`` mapping."""

    name: str
    applies: Predicate
    build: Builder


def when(
    libs: Iterable[str] | None = None,
    patterns: Iterable[str] | None = None,
    styles: Iterable[str] | None = None,
    langs: Iterable[str] | None = None,
) -> Predicate:
    """Predicate matching tuples whose dimensions fall in the given sets.

    A dimension left as None is unrestricted.
    """
    lib_set = frozenset(libs) if libs else None
    pattern_set = frozenset(patterns) if patterns else None
    style_set = frozenset(styles) if styles else None
    lang_set = frozenset(langs) if langs else None

    def _applies(spike: SpikeTuple) -> bool:
        return (
            (lib_set is None or spike.library in lib_set)
            and (pattern_set is None or spike.pattern in pattern_set)
            and (style_set is None or spike.style in style_set)
            and (lang_set is None or spike.language in lang_set)
        )

    return _applies


def static_files(*pairs: tuple[str, str]) -> Builder:
    """Builder returning the same ``(path, template)`` files for every tuple."""
    frozen = tuple(pairs)

    def _build(spike: SpikeTuple) -> list[SpikeFile]:
        return [SpikeFile(path=path, template=template) for path, template in frozen]

    return _build


_RULES: list[SpecializationRule] = []


def register_rule(
    name: str, applies: Predicate, build: Builder
) -> SpecializationRule:
    """Append a rule to the registry and return it."""
    if any(r.name == name for r in _RULES):
        raise ValueError(f"Duplicate specialization rule: {name}")
    rule = SpecializationRule(name=name, applies=applies, build=build)
    _RULES.append(rule)
    return rule


def get_rules() -> tuple[SpecializationRule, ...]:
    """Registered rules in evaluation order."""
    return tuple(_RULES)


def matching_rules(spike: SpikeTuple) -> list[SpecializationRule]:
    return [r for r in _RULES if r.applies(spike)]


def build_specialized_files(spike: SpikeTuple) -> list[SpikeFile]:
    """Concatenate the files of every rule that applies to ``spike``."""
    files: list[SpikeFile] = []
    for rule in _RULES:
        if rule.applies(spike):
            files.extend(rule.build(spike))
    return files


# region Web frameworks
register_rule(
    "nextjs-route",
    when(["nextjs"], ["route"]),
    static_files(
        (
            "app/api/health/route.ts",
            "import { NextResponse } from 'next/server';\n"
            "export async function GET(){ return NextResponse.json({ ok: true }); }\n",
        )
    ),
)
register_rule(
    "nextjs-middleware",
    when(["nextjs"], ["config", "init", "middleware"]),
    static_files(
        (
            "middleware.ts",
            "import { NextResponse } from 'next/server';\n"
            "export function middleware(){ return NextResponse.next(); }\n",
        )
    ),
)
register_rule(
    "nextjs-server-action",
    when(["nextjs"], ["service"]),
    static_files(
        (
            "app/actions/demo.ts",
            "'use server';\nexport async function demoAction(){ return { ok: true }; }\n",
        )
    ),
)
register_rule(
    "nextjs-secure-headers",
    when(["nextjs"], ["middleware", "route"], ["secure"]),
    static_files(
        (
            "src/security/headers.ts",
            "export const securityHeaders = {\n"
            "  'X-Frame-Options': 'DENY',\n"
            "  'X-Content-Type-Options': 'nosniff',\n"
            "  'Referrer-Policy': 'strict-origin-when-cross-origin',\n"
            "};\n",
        )
    ),
)
register_rule(
    "remix-route",
    when(["remix"], ["route"]),
    static_files(
        (
            "app/routes/health.tsx",
            "import { json } from '@remix-run/node';\n"
            "export const loader = async () => json({ ok: true });\n",
        )
    ),
)
register_rule(
    "react-component",
    when(["react"], ["component"]),
    static_files(
        (
            "src/components/Demo.tsx",
            "type Props = { title?: string };\n"
            "export function Demo({ title = '{{app_name}}' }: Props){ return <h1>{title}</h1>; }\n",
        )
    ),
)
register_rule(
    "react-hook",
    when(["react"], ["hook"]),
    static_files(
        (
            "src/hooks/useToggle.ts",
            "import { useCallback, useState } from 'react';\n"
            "export function useToggle(initial = false){\n"
            "  const [on, setOn] = useState(initial);\n"
            "  const toggle = useCallback(() => setOn(v => !v), []);\n"
            "  return [on, toggle] as const;\n"
            "}\n",
        )
    ),
)
register_rule(
    "express-middleware",
    when(["express"], ["middleware"]),
    static_files(
        (
            "src/middleware/requestId.ts",
            "import { randomUUID } from 'node:crypto';\n"
            "import type { NextFunction, Request, Response } from 'express';\n"
            "export function requestId(req: Request, res: Response, next: NextFunction){\n"
            "  res.setHeader('x-request-id', randomUUID());\n"
            "  next();\n"
            "}\n",
        )
    ),
)
register_rule(
    "express-secure",
    when(["express", "fastify", "koa"], ["route", "middleware", "plugin"], ["secure"]),
    static_files(
        (
            "src/security.ts",
            "import helmet from 'helmet';\n"
            "import rateLimit from 'express-rate-limit';\n"
            "export const security = [helmet(), rateLimit({ windowMs: 60_000, max: 100 })];\n",
        )
    ),
)
register_rule(
    "fastapi-router",
    when(["fastapi"], ["route", "controller"], langs=["py"]),
    static_files(
        (
            "app/routers/health.py",
            "from fastapi import APIRouter\n\n"
            "router = APIRouter()\n\n\n"
            "@router.get('/health')\n"
            "async def health():\n"
            "    return {'ok': True, 'app': '{{app_name}}'}\n",
        )
    ),
)
register_rule(
    "fastapi-secure",
    when(["fastapi"], ["route", "middleware"], ["secure"], ["py"]),
    static_files(
        (
            "app/security.py",
            "from fastapi import Depends, HTTPException, status\n"
            "from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials\n\n"
            "bearer = HTTPBearer()\n\n\n"
            "def require_token(creds: HTTPAuthorizationCredentials = Depends(bearer)):\n"
            "    if not creds.credentials:\n"
            "        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)\n"
            "    return creds.credentials\n",
        )
    ),
)
# endregion

# region Bun / Elysia
register_rule(
    "elysia-worker",
    when(["bun-elysia", "elysia"], ["worker", "job"]),
    static_files(
        (
            "src/worker.ts",
            "declare var self: Worker;\n"
            "self.onmessage = (event: MessageEvent) => {\n"
            "  postMessage({ ok: true, received: event.data });\n"
            "};\n",
        )
    ),
)
register_rule(
    "elysia-listener",
    when(["bun-elysia", "elysia"], ["listener", "route", "minimal"]),
    static_files(
        (
            "src/server.ts",
            "import { Elysia } from 'elysia';\n"
            "new Elysia().get('/health', () => ({ ok: true })).listen(3000);\n",
        )
    ),
)
register_rule(
    "elysia-plugin",
    when(["bun-elysia", "elysia"], ["plugin"]),
    static_files(
        (
            "src/plugin.ts",
            "import { Elysia } from 'elysia';\n"
            "export const plugin = new Elysia({ name: '{{app_name}}' })"
            ".derive(() => ({ startedAt: Date.now() }));\n",
        )
    ),
)
register_rule(
    "elysia-secure-plugin",
    when(["bun-elysia", "elysia"], ["plugin", "middleware"], ["secure"]),
    static_files(
        (
            "src/security.ts",
            "import { Elysia } from 'elysia';\n"
            "import { helmet } from 'elysia-helmet';\n"
            "import { rateLimit } from 'elysia-rate-limit';\n"
            "export const security = new Elysia().use(helmet()).use(rateLimit());\n",
        )
    ),
)
# endregion

# region API layers
register_rule(
    "graphql-schema",
    when(["graphql"], ["service", "route", "schema"]),
    static_files(
        ("schema.graphql", "type Query { hello: String! }\n"),
        (
            "src/graphql/resolvers.ts",
            "export const resolvers = { Query: { hello: () => 'world' } };\n",
        ),
    ),
)
register_rule(
    "apollo-server",
    when(["apollo"], ["service", "route"]),
    static_files(
        (
            "src/apollo/server.ts",
            "import { ApolloServer } from '@apollo/server';\n"
            "import { startStandaloneServer } from '@apollo/server/standalone';\n"
            "const typeDefs = `type Query { hello: String! }`;\n"
            "const resolvers = { Query: { hello: () => 'world' } };\n"
            "const server = new ApolloServer({ typeDefs, resolvers });\n"
            "startStandaloneServer(server, { listen: { port: 4000 } });\n",
        )
    ),
)
register_rule(
    "apollo-client",
    when(["apollo"], ["client"]),
    static_files(
        (
            "src/apollo/client.ts",
            "import { ApolloClient, InMemoryCache, HttpLink } from '@apollo/client';\n"
            "export const client = new ApolloClient({ link: new HttpLink({ uri: '/api/graphql' }),"
            " cache: new InMemoryCache() });\n",
        )
    ),
)
register_rule(
    "trpc-router",
    when(["trpc"], ["route", "service"]),
    static_files(
        (
            "src/trpc/router.ts",
            "import { initTRPC } from '@trpc/server';\n"
            "const t = initTRPC.create();\n"
            "export const appRouter = t.router({ hello: t.procedure.query(() => 'world') });\n"
            "export type AppRouter = typeof appRouter;\n",
        )
    ),
)
register_rule(
    "openapi-spec",
    when(["openapi", "swagger"], ["config", "schema", "init"]),
    static_files(
        (
            "openapi.yaml",
            "openapi: 3.0.3\n"
            "info: { title: '{{app_name}}', version: '0.1.0' }\n"
            "paths:\n"
            "  /health:\n"
            "    get:\n"
            "      responses: { '200': { description: ok } }\n",
        )
    ),
)
# endregion

# region Data
register_rule(
    "prisma-client",
    when(["prisma"], ["crud", "service", "schema"]),
    static_files(
        (
            "src/prisma.ts",
            "import { PrismaClient } from '@prisma/client';\n"
            "export const prisma = new PrismaClient();\n",
        ),
        (
            "prisma/schema.prisma",
            'datasource db { provider = "postgresql" url = env("DATABASE_URL") }\n'
            'generator client { provider = "prisma-client-js" }\n'
            "model User { id Int @id @default(autoincrement()) email String @unique"
            " name String? createdAt DateTime @default(now()) }\n",
        ),
    ),
)
register_rule(
    "prisma-transaction-service",
    when(["prisma"], ["service"]),
    static_files(
        (
            "src/user.service.ts",
            "import { prisma } from './prisma';\n"
            "export async function createUserWithTx(email: string){\n"
            "  return await prisma.$transaction(async (tx)=>{\n"
            "    const user = await tx.user.create({ data: { email } });\n"
            "    return user;\n"
            "  });\n"
            "}\n",
        )
    ),
)
register_rule(
    "drizzle-schema",
    when(["drizzle"], ["schema", "crud"]),
    static_files(
        (
            "src/db/schema.ts",
            "import { pgTable, serial, text } from 'drizzle-orm/pg-core';\n"
            "export const users = pgTable('users', { id: serial('id').primaryKey(),"
            " email: text('email').notNull() });\n",
        )
    ),
)
register_rule(
    "mongoose-model",
    when(["mongoose"], ["schema", "crud", "service"]),
    static_files(
        (
            "src/models/user.ts",
            "import { Schema, model } from 'mongoose';\n"
            "export const User = model('User', new Schema({ email: { type: String,"
            " required: true, unique: true } }));\n",
        )
    ),
)
register_rule(
    "redis-client",
    when(["redis"], ["client", "service", "config"]),
    static_files(
        (
            "src/redis.ts",
            "import { createClient } from 'redis';\n"
            "export const redis = createClient({ url: process.env.REDIS_URL });\n"
            "await redis.connect();\n",
        )
    ),
)
register_rule(
    "supabase-client",
    when(["supabase", "supabase-auth"], ["client", "config"]),
    static_files(
        (
            "src/supabase.ts",
            "import { createClient } from '@supabase/supabase-js';\n"
            "export const supabase = createClient(process.env.SUPABASE_URL!,"
            " process.env.SUPABASE_ANON_KEY!);\n",
        )
    ),
)
# endregion

# region Messaging
register_rule(
    "bullmq-queue",
    when(["bullmq"], ["job", "worker", "service"]),
    static_files(
        (
            "src/queue.ts",
            "import { Queue } from 'bullmq';\n"
            "export const queue = new Queue('{{app_name}}');\n",
        )
    ),
)
register_rule(
    "bullmq-worker",
    when(["bullmq"], ["worker", "job"]),
    static_files(
        (
            "src/worker.ts",
            "import { Worker } from 'bullmq';\n"
            "export const worker = new Worker('{{app_name}}', async job => ({ id: job.id }));\n",
        )
    ),
)
register_rule(
    "kafka-client",
    when(["kafka"], ["client", "service", "listener"]),
    static_files(
        (
            "src/kafka.ts",
            "import { Kafka } from 'kafkajs';\n"
            "export const kafka = new Kafka({ clientId: '{{app_name}}', brokers: ['localhost:9092'] });\n",
        )
    ),
)
register_rule(
    "rabbitmq-client",
    when(["rabbitmq"], ["client", "listener", "worker"]),
    static_files(
        (
            "src/amqp.ts",
            "import amqp from 'amqplib';\n"
            "export async function connect(){ return amqp.connect(process.env.AMQP_URL!); }\n",
        )
    ),
)
# endregion

# region Auth
register_rule(
    "next-auth-route",
    when(["next-auth"], ["config", "route"]),
    static_files(
        (
            "app/api/auth/[...nextauth]/route.ts",
            "import NextAuth from 'next-auth';\n"
            "import Credentials from 'next-auth/providers/credentials';\n"
            "const handler = NextAuth({ providers: [Credentials({ name: 'Credentials',"
            " credentials: { username: {}, password: {} },"
            " authorize: async () => ({ id: '1', name: 'demo' }) })] });\n"
            "export { handler as GET, handler as POST };\n",
        )
    ),
)
register_rule(
    "passport-strategy",
    when(["passport"], ["config", "middleware"]),
    static_files(
        (
            "src/auth/passport.ts",
            "import passport from 'passport';\n"
            "import { Strategy as LocalStrategy } from 'passport-local';\n"
            "passport.use(new LocalStrategy((username, password, done) =>"
            " done(null, { id: '1', username })));\n"
            "export default passport;\n",
        )
    ),
)
register_rule(
    "clerk-middleware",
    when(["clerk"], ["middleware", "config"]),
    static_files(
        (
            "middleware.ts",
            "import { clerkMiddleware } from '@clerk/nextjs/server';\n"
            "export default clerkMiddleware();\n",
        )
    ),
)
# endregion

# region Infrastructure and CI
register_rule(
    "github-actions-ci",
    when(["github-actions"], ["config", "init"]),
    static_files(
        (
            ".github/workflows/ci.yml",
            "name: CI\n"
            "on: [push, pull_request]\n"
            "jobs:\n"
            "  test:\n"
            "    runs-on: ubuntu-latest\n"
            "    steps:\n"
            "      - uses: actions/checkout@v4\n"
            "      - uses: actions/setup-node@v4\n"
            "        with: { node-version: '20' }\n"
            "      - run: npm ci\n"
            "      - run: npm test\n",
        )
    ),
)
register_rule(
    "docker-image",
    when(["docker"], ["config", "init", "minimal"]),
    static_files(
        (
            "Dockerfile",
            "FROM node:20-alpine\n"
            "WORKDIR /app\n"
            "COPY . .\n"
            "RUN npm ci --omit=dev\n"
            'CMD ["node", "dist/index.js"]\n',
        ),
        (".dockerignore", "node_modules\n.git\n"),
    ),
)
register_rule(
    "kubernetes-deployment",
    when(["kubernetes", "helm"], ["config", "init", "service"]),
    static_files(
        (
            "k8s/deployment.yaml",
            "apiVersion: apps/v1\n"
            "kind: Deployment\n"
            "metadata: { name: '{{app_name}}' }\n"
            "spec:\n"
            "  replicas: 1\n"
            "  selector: { matchLabels: { app: '{{app_name}}' } }\n"
            "  template:\n"
            "    metadata: { labels: { app: '{{app_name}}' } }\n"
            "    spec:\n"
            "      containers:\n"
            "        - name: app\n"
            "          image: '{{app_name}}:latest'\n",
        )
    ),
)
register_rule(
    "terraform-main",
    when(["terraform"], ["config", "init"]),
    static_files(
        (
            "main.tf",
            'terraform {\n  required_version = ">= 1.5"\n}\n\n'
            'variable "name" {\n  default = "{{app_name}}"\n}\n',
        )
    ),
)
register_rule(
    "aws-lambda-handler",
    when(["aws-lambda", "serverless"], ["route", "service", "job"]),
    static_files(
        (
            "src/handler.ts",
            "export const handler = async () => ({ statusCode: 200,"
            " body: JSON.stringify({ ok: true }) });\n",
        )
    ),
)
# endregion

# region AI providers
register_rule(
    "openai-client",
    when(["openai"], ["client", "service"]),
    static_files(
        (
            "src/ai/openai.ts",
            "import OpenAI from 'openai';\n"
            "export const openai = new OpenAI({ apiKey: process.env.OPENAI_API_KEY });\n",
        )
    ),
)
register_rule(
    "anthropic-client",
    when(["anthropic"], ["client", "service"]),
    static_files(
        (
            "src/ai/anthropic.ts",
            "import Anthropic from '@anthropic-ai/sdk';\n"
            "export const anthropic = new Anthropic({ apiKey: process.env.ANTHROPIC_API_KEY });\n",
        )
    ),
)
for _provider in ("groq", "mistral", "cohere"):
    register_rule(
        f"{_provider}-client",
        when([_provider], ["client"]),
        static_files(
            (
                f"src/ai/{_provider}.ts",
                f"// {_provider} client for {{{{app_name}}}}\n"
                f"export const {_provider}Key = process.env.{_provider.upper()}_API_KEY;\n",
            )
        ),
    )
# endregion

# region Payments
register_rule(
    "stripe-webhook",
    when(["stripe"], ["webhook", "route"]),
    static_files(
        (
            "src/payments/stripe-webhook.ts",
            "import Stripe from 'stripe';\n"
            "const stripe = new Stripe(process.env.STRIPE_SECRET_KEY!);\n"
            "export function verify(body: string, signature: string){\n"
            "  return stripe.webhooks.constructEvent(body, signature,"
            " process.env.STRIPE_WEBHOOK_SECRET!);\n"
            "}\n",
        )
    ),
)
register_rule(
    "stripe-service",
    when(["stripe"], ["service", "client"]),
    static_files(
        (
            "src/payments/stripe.ts",
            "import Stripe from 'stripe';\n"
            "export const stripe = new Stripe(process.env.STRIPE_SECRET_KEY!);\n",
        )
    ),
)
# endregion

# region Search, storage, monitoring, content
for _engine in ("elasticsearch", "opensearch", "meilisearch", "typesense", "algolia"):
    register_rule(
        f"{_engine}-client",
        when([_engine], ["client", "service", "adapter"]),
        static_files(
            (
                f"src/search/{_engine}.ts",
                f"// {_engine} client\nexport const searchHost = process.env.SEARCH_URL"
                " ?? 'http://localhost';\n",
            )
        ),
    )
register_rule(
    "s3-upload",
    when(["s3", "minio"], ["adapter", "service", "client", "route"]),
    static_files(
        (
            "src/storage/s3.ts",
            "import { S3Client, PutObjectCommand } from '@aws-sdk/client-s3';\n"
            "const s3 = new S3Client({});\n"
            "export async function upload(key: string, body: Uint8Array){\n"
            "  return s3.send(new PutObjectCommand({ Bucket: process.env.BUCKET!, Key: key,"
            " Body: body }));\n"
            "}\n",
        )
    ),
)
register_rule(
    "sentry-config",
    when(["sentry"], ["config", "init", "middleware"]),
    static_files(
        (
            "src/monitoring/sentry.ts",
            "import * as Sentry from '@sentry/node';\n"
            "Sentry.init({ dsn: process.env.SENTRY_DSN, tracesSampleRate: 0.1 });\n",
        )
    ),
)
register_rule(
    "prometheus-metrics",
    when(["prometheus"], ["middleware", "config", "service"]),
    static_files(
        (
            "src/monitoring/metrics.ts",
            "import client from 'prom-client';\n"
            "client.collectDefaultMetrics();\n"
            "export const registry = client.register;\n",
        )
    ),
)
for _cms in ("strapi", "contentful", "sanity", "ghost"):
    register_rule(
        f"{_cms}-client",
        when([_cms], ["client"]),
        static_files(
            (
                f"src/cms/{_cms}.ts",
                f"// {_cms} content client\nexport const cmsUrl = process.env.CMS_URL;\n",
            )
        ),
    )
register_rule(
    "i18next-config",
    when(["i18next"], ["config", "init"]),
    static_files(
        (
            "src/i18n/i18next.ts",
            "import i18next from 'i18next';\n"
            "await i18next.init({ lng: 'en', resources: { en: { translation: {} } } });\n"
            "export default i18next;\n",
        )
    ),
)
register_rule(
    "next-intl-route",
    when(["next-intl"], ["route"]),
    static_files(
        (
            "app/api/i18n/hello/route.ts",
            "export async function GET(){ return Response.json({ message: 'hello' }); }\n",
        )
    ),
)
# endregion

# region LINE and Expo
register_rule(
    "line-webhook",
    when(["line"], ["webhook", "client"]),
    static_files(
        (
            "src/line/webhook.ts",
            "import { messagingApi, WebhookEvent } from '@line/bot-sdk';\n"
            "export async function handleEvents(events: WebhookEvent[]){ return events.length; }\n",
        ),
        (
            "src/line/verify.ts",
            "import { validateSignature } from '@line/bot-sdk';\n"
            "export const verify = (body: string, sig: string) =>"
            " validateSignature(body, process.env.LINE_CHANNEL_SECRET!, sig);\n",
        ),
    ),
)
register_rule(
    "line-middleware",
    when(["line"], ["middleware"]),
    static_files(
        (
            "src/line/middleware.ts",
            "import { middleware } from '@line/bot-sdk';\n"
            "export const lineMiddleware = middleware({"
            " channelSecret: process.env.LINE_CHANNEL_SECRET! });\n",
        )
    ),
)
register_rule(
    "line-adapter",
    when(["line"], ["adapter"]),
    static_files(
        (
            "src/line/echo-adapter.ts",
            "export function echo(text: string){ return { type: 'text', text }; }\n",
        )
    ),
)
register_rule(
    "line-token-exchange",
    when(["line"], ["route", "service"], ["secure"]),
    lambda spike: [
        SpikeFile(
            path="src/line/routes/exchange.ts" if spike.pattern == "route" else "src/line/oauth.ts",
            template="export async function exchange(code: string){\n"
            "  return fetch('https://api.line.me/oauth2/v2.1/token', { method: 'POST',"
            " body: new URLSearchParams({ code }) });\n"
            "}\n",
        )
    ],
)
register_rule(
    "expo-example",
    when(["expo"], ["example", "minimal"]),
    static_files(
        (
            "App.tsx",
            "import { Text, View } from 'react-native';\n"
            "export default function App(){ return <View><Text>{{app_name}}</Text></View>; }\n",
        )
    ),
)
# endregion

# region Testing tooling
register_rule(
    "vitest-config",
    when(["vitest"], ["config", "init"]),
    static_files(
        (
            "vitest.config.ts",
            "import { defineConfig } from 'vitest/config';\n"
            "export default defineConfig({ test: { environment: 'node' } });\n",
        )
    ),
)
register_rule(
    "playwright-config",
    when(["playwright"], ["config", "init"]),
    static_files(
        (
            "playwright.config.ts",
            "import { defineConfig } from '@playwright/test';\n"
            "export default defineConfig({ testDir: './e2e' });\n",
        )
    ),
)
# endregion


# region Style rules
def _test_stub(spike: SpikeTuple) -> list[SpikeFile]:
    base = f"spikes/{spike.library}-{spike.pattern}"
    if spike.language in ("ts", "js"):
        return [
            SpikeFile(
                path=f"{base}.test.{spike.language}",
                template="describe('demo', ()=>{ it('works', ()=>{ expect(true).toBe(true); }); });\n",
            )
        ]
    if spike.language == "py":
        return [SpikeFile(path=f"{base}_test.py", template="def test_demo():\n    assert True\n")]
    if spike.language == "go":
        return [
            SpikeFile(
                path=f"{base}_test.go",
                template='package main\nimport "testing"\nfunc TestDemo(t *testing.T){ demo() }\n',
            )
        ]
    return []


register_rule("testing-stub", when(styles=["testing"]), _test_stub)


def _typed_contract(spike: SpikeTuple) -> list[SpikeFile]:
    return [
        SpikeFile(
            path=f"src/types/{spike.library}.d.ts",
            template=f"export interface {spike.pattern.capitalize()}Options {{\n"
            "  name: string;\n}\n",
        )
    ]


register_rule("typed-contract", when(styles=["typed"], langs=["ts"]), _typed_contract)
register_rule(
    "secure-env-example",
    when(styles=["secure"]),
    static_files((".env.example", "# Secrets for {{app_name}}; never commit real values\n")),
)
# endregion
