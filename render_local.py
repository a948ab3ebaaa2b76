#!/usr/bin/env python3
"""
Render a document template locally (no S3).

Reads template variables from a JSON file (or stdin), optionally merged over
variables pre-filled from form submissions, and writes the HTML document.

Usage:
  python render_local.py --template credit_auth_form --variables vars.json --output credit_auth.html
  python render_local.py --template rent_roll --form shortApplication=short_app.json --output rent_roll.html
  python render_local.py --list
"""

import argparse
import json
import sys
from pathlib import Path

from document_templates import DocumentTemplateService, TemplateNotFoundError, find_unresolved_placeholders
from prefill import DocumentPreFillService

LOCAL_SESSION = "local"


def _load_json(path: str):
    if path == "-":
        return json.load(sys.stdin)
    input_path = Path(path)
    if not input_path.exists():
        print(f"Error: Input JSON not found: {input_path}", file=sys.stderr)
        sys.exit(1)
    with open(input_path, "r", encoding="utf-8") as f:
        return json.load(f)


def main():
    p = argparse.ArgumentParser(description="Render a loan document template from local JSON files.")
    p.add_argument("--template", "-t", help="Template id, e.g. credit_auth_form")
    p.add_argument("--variables", "-v", default=None, help="Path to JSON object of template variables, or '-' for stdin")
    p.add_argument("--form", "-f", action="append", default=[], metavar="FORM_TYPE=PATH",
                   help="Form submission to pre-fill variables from (repeatable)")
    p.add_argument("--output", "-o", default=None, help="Output .html path (default: <template>.html)")
    p.add_argument("--list", action="store_true", help="List available templates and exit")
    args = p.parse_args()

    templates = DocumentTemplateService()
    if args.list:
        for template in templates.get_all_templates():
            print(f"{template.id:32} {template.category.value:14} {template.name}")
        return

    if not args.template:
        p.error("--template is required unless --list is given")

    prefill = DocumentPreFillService()
    for form_arg in args.form:
        form_type, _, path = form_arg.partition("=")
        if not path:
            p.error(f"--form expects FORM_TYPE=PATH, got {form_arg!r}")
        prefill.store_form_data(LOCAL_SESSION, form_type, _load_json(path))

    variables = prefill.get_template_variables(LOCAL_SESSION) if args.form else {}
    if args.variables:
        raw = _load_json(args.variables)
        if not isinstance(raw, dict):
            print("Error: variables JSON must be an object", file=sys.stderr)
            sys.exit(1)
        variables.update({key: str(value) for key, value in raw.items()})

    try:
        content = templates.generate_document(args.template, variables)
    except TemplateNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output_path = Path(args.output) if args.output else Path(f"{args.template}.html")
    output_path.write_text(content, encoding="utf-8")
    print(f"Wrote {output_path} ({len(content.encode('utf-8'))} bytes)")

    unresolved = find_unresolved_placeholders(content)
    if unresolved:
        print(f"Warning: unresolved placeholders: {', '.join(unresolved)}", file=sys.stderr)


if __name__ == "__main__":
    main()
