"""Base code snippets shared by every generated spike."""

from __future__ import annotations

from spike_studio.spikes.identifiers import SpikeTuple

# (library, pattern, language) -> body written after the header
_SPECIAL_SNIPPETS: dict[tuple[str, str, str], str] = {
    ("express", "route", "ts"): (
        "import express, { Request, Response } from 'express';\n"
        "const app = express();\n"
        "app.get('/health', (req: Request, res: Response) => { res.json({ ok: true }); });\n"
        "app.listen(3000);\n"
    ),
    ("express", "route", "js"): (
        "const express = require('express');\n"
        "const app = express();\n"
        "app.get('/health', (req, res) => res.json({ ok: true }));\n"
        "app.listen(3000);\n"
    ),
    ("fastapi", "route", "py"): (
        "from fastapi import FastAPI\n"
        "app = FastAPI()\n"
        "@app.get('/health')\n"
        "async def health():\n"
        "    return {'ok': True}\n"
    ),
    ("flask", "route", "py"): (
        "from flask import Flask, jsonify\n"
        "app = Flask(__name__)\n"
        "@app.get('/health')\n"
        "def health():\n"
        "    return jsonify(ok=True)\n"
    ),
}

# language -> stub template; {lib}, {pattern} and {style} are filled in
_STUBS: dict[str, str] = {
    "ts": (
        "// Auto-generated spike stub for {lib} ({pattern})\n"
        "export function demo() {{\n"
        "  console.log('use {lib} - {pattern} ({style})');\n"
        "}}\n"
    ),
    "js": (
        "// Auto-generated spike stub for {lib} ({pattern})\n"
        "module.exports = function demo(){{\n"
        "  console.log('use {lib} - {pattern} ({style})');\n"
        "}};\n"
    ),
    "py": (
        "# Auto-generated spike stub for {lib} ({pattern})\n"
        "def demo():\n"
        "    print('use {lib} - {pattern} ({style})')\n"
    ),
    "go": (
        "// Auto-generated spike stub for {lib} ({pattern})\n"
        "package main\n"
        'import "fmt"\n'
        'func demo(){{ fmt.Println("use {lib} - {pattern} ({style})") }}\n'
    ),
    "rs": (
        "// Auto-generated spike stub for {lib} ({pattern})\n"
        'pub fn demo(){{ println!("use {lib} - {pattern} ({style})"); }}\n'
    ),
    "kt": (
        "// Auto-generated spike stub for {lib} ({pattern})\n"
        'fun demo(){{ println("use {lib} - {pattern} ({style})") }}\n'
    ),
}


def code_snippet(spike: SpikeTuple) -> str:
    """Return the stub source for a tuple."""
    header = f"# Spike: {spike.library} {spike.pattern} ({spike.language})\n"
    special = _SPECIAL_SNIPPETS.get((spike.library, spike.pattern, spike.language))
    if special:
        return header + special
    stub = _STUBS.get(spike.language)
    if stub is None:
        return header + f"// Auto-generated spike stub for {spike.library} ({spike.pattern})\n"
    return header + stub.format(lib=spike.library, pattern=spike.pattern, style=spike.style)


def readme(spike: SpikeTuple) -> str:
    return (
        f"# {spike.library} {spike.pattern} ({spike.style}, {spike.language})\n\n"
        "This is an auto-generated spike template for {{app_name}}.\n"
    )
