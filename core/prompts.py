"""
Prompt templates for the two conversion directions.
"""

import re
from typing import Optional

from config.constants import DOCX_MIME_TYPE, MSG_UNSUPPORTED_TYPE, PDF_MIME_TYPE
from core.exceptions import UnsupportedFileError


PDF_TYPE_INSTRUCTIONS = "The input is a PDF document."
DOCX_TYPE_INSTRUCTIONS = "The input is the HTML representation of a DOCX file."


DOC_TO_LATEX_PROMPT = """
You are an expert LaTeX typesetter.
Please convert the attached document content into high-quality, well-structured LaTeX code.

{type_instructions}

Detailed Requirements:
1. Use a standard preamble (article class) unless the style sample specifies otherwise.
2. **Formatting**: accurately convert bold text (\\textbf), italic text (\\textit), lists (itemize/enumerate), and section headings.
3. **Tables**: Convert tables to proper LaTeX 'tabular' environments, preserving columns and headers.
4. **Math**: Detect mathematical expressions and convert them to LaTeX math mode ($...$ or \\[...\\]).
5. Do not surround the output with markdown code fences (like ```latex). Just output the raw LaTeX code.
6. If there are images, use placeholders like \\includegraphics[width=\\linewidth]{{placeholder}}.
"""


STYLE_REFERENCE_BLOCK = """

**STYLE REFERENCE**:
The user has provided a sample .tex file to define the desired styling, preamble, and package usage.
Please adhere to the formatting style found in the following code as closely as possible when generating the output:

--- BEGIN STYLE SAMPLE ---
{style_sample}
--- END STYLE SAMPLE ---
"""


LATEX_TO_DOC_PROMPT = """
You are a document conversion assistant.
Convert the following LaTeX code into a standalone, beautiful HTML5 document that looks like a printed paper.

Requirements:
1. Output **full HTML5** code (<html>, <head>, <body>).
2. Use **internal CSS** (<style>) to style the document to look like a clean academic paper or professional document (e.g., Times New Roman font, max-width 800px, centered, proper line height).
3. **Structure**: Correctly render \\section as <h1>/<h2>, \\textbf as <strong>, \\textit as <em>, lists as <ul>/<ol>.
4. **Tables**: Render LaTeX tables as HTML <table> with borders and padding.
5. **Math**: If possible, assume the user might not have MathJax. Try to render simple math as text or unicode, but for complex math, leave it as LaTeX syntax or use simple HTML formatting where possible.
6. Do not include markdown code fences (```html). Output raw HTML only.

LaTeX Input:
{latex_code}
"""


DOCX_CONTENT_PREFIX = "Input Document Content (HTML format): \n"

# One fence pair around the whole answer, with an optional language tag
_FENCE_RE = re.compile(r"\A\s*```[\w+-]*[ \t]*\n(?P<body>.*?)\n?```\s*\Z", re.DOTALL)


def type_instructions(mime_type: str) -> str:
    """Describe the attached input to the model"""
    if mime_type == PDF_MIME_TYPE:
        return PDF_TYPE_INSTRUCTIONS
    elif mime_type == DOCX_MIME_TYPE:
        return DOCX_TYPE_INSTRUCTIONS
    raise UnsupportedFileError(MSG_UNSUPPORTED_TYPE)


def build_doc_to_latex_prompt(type_instructions: str, style_sample: Optional[str] = None) -> str:
    """
    Build the document -> LaTeX prompt.

    Args:
        type_instructions: Sentence describing the attached input
        style_sample: Optional .tex source whose preamble and style the
            output should follow

    Returns:
        Prompt text; the document itself travels as a separate part
    """
    prompt = DOC_TO_LATEX_PROMPT.format(type_instructions=type_instructions)
    if style_sample:
        prompt += STYLE_REFERENCE_BLOCK.format(style_sample=style_sample)
    return prompt


def build_docx_content_text(html: str) -> str:
    """Wrap extracted DOCX HTML as a text part"""
    return f"{DOCX_CONTENT_PREFIX}{html}"


def build_latex_to_doc_prompt(latex_code: str) -> str:
    """Build the LaTeX -> HTML document prompt, with the code inlined"""
    return LATEX_TO_DOC_PROMPT.format(latex_code=latex_code)


def strip_code_fences(text: str) -> str:
    """Remove a markdown fence pair wrapping the whole answer, if present"""
    match = _FENCE_RE.match(text)
    if match:
        return match.group("body")
    return text
