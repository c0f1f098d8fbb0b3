#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Texify CLI - convert documents to LaTeX and LaTeX to documents from the shell

Usage:
    texify to-latex paper.pdf --style template.tex -o paper.tex
    texify to-doc paper.tex -o paper.html
    texify providers
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from ai_providers import create_provider_from_settings, list_providers
from config.logging_config import get_logger, setup_logger
from config.settings import settings
from core.converter import DocumentConverter
from core.exceptions import TexifyError
from core.file_utils import (
    check_file_size,
    format_file_size,
    load_file_data,
    read_text_file,
    validate_document,
    validate_style_file,
)
from core.result_viewer import ResultType, ResultView

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="texify",
        description="AI-powered conversion between PDF/DOCX documents and LaTeX",
    )
    parser.add_argument("--provider", help="gemini, claude or openai (default from settings)")
    parser.add_argument("--model", help="Model id (default from settings)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")

    sub = parser.add_subparsers(dest="command", required=True)

    to_latex = sub.add_parser("to-latex", help="Convert a PDF or DOCX file to LaTeX")
    to_latex.add_argument("input", type=Path, help="PDF or DOCX file")
    to_latex.add_argument("--style", type=Path, help="Optional .tex style sample")
    to_latex.add_argument("-o", "--output", type=Path, help="Output path (default: converted_output.tex)")

    to_doc = sub.add_parser("to-doc", help="Convert LaTeX source to an HTML document")
    to_doc.add_argument("input", type=Path, help="LaTeX source file")
    to_doc.add_argument("-o", "--output", type=Path, help="Output path (default: converted_output.html)")

    sub.add_parser("providers", help="List AI providers and configured keys")
    return parser


async def run_to_latex(args, converter: DocumentConverter) -> Path:
    file_data = load_file_data(args.input)
    validate_document(file_data.name, file_data.type)
    check_file_size(file_data.size, settings.max_upload_size_mb)
    print(f"📥 Input: {args.input} ({format_file_size(file_data.size)})")

    style_sample = None
    if args.style:
        validate_style_file(args.style.name)
        style_sample = read_text_file(args.style)
        print(f"🎨 Style: {args.style}")

    latex = await converter.convert_doc_to_latex(file_data, style_sample)
    return save_result(ResultView(content=latex, type=ResultType.LATEX), args.output)


async def run_to_doc(args, converter: DocumentConverter) -> Path:
    latex = read_text_file(args.input)
    if not latex.strip():
        raise TexifyError(f"{args.input} is empty")
    print(f"📥 Input: {args.input} ({len(latex)} characters)")

    document_html = await converter.convert_latex_to_doc(latex)
    return save_result(ResultView(content=document_html, type=ResultType.HTML), args.output)


def save_result(view: ResultView, output: Path = None) -> Path:
    if output is None:
        return view.save(Path.cwd())
    return view.save(output.parent, output.name)


def print_providers():
    for info in list_providers():
        mark = "✅" if settings.get_api_key(info.type.value) else "❌"
        print(f"{mark} {info.type.value:<8} {info.name} (default model: {info.default_model}, key: {info.env_key})")


def main(argv=None) -> int:
    """Entry point for the texify console script"""
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logger("texify", level=args.log_level or settings.log_level)

    if args.command == "providers":
        print_providers()
        return 0

    print("=" * 60)
    print("📐 TEXIFY")
    print("=" * 60)

    try:
        provider = create_provider_from_settings(settings, provider=args.provider, model=args.model)
        converter = DocumentConverter(provider, strip_fences=settings.strip_code_fences)
        print(f"🤖 Provider: {provider.provider_type.value} / {provider.config.model}")

        if args.command == "to-latex":
            output = asyncio.run(run_to_latex(args, converter))
        else:
            output = asyncio.run(run_to_doc(args, converter))
    except (TexifyError, ValueError) as e:
        print(f"❌ Error: {getattr(e, 'message', str(e))}", file=sys.stderr)
        return 1

    print(f"📤 Output: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
