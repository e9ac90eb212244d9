#!/usr/bin/env python3
"""Link term references to their definitions in an HTML document.

Usage:
    python3 scripts/link_definitions.py --html spec.html --out linked.html
    python3 scripts/link_definitions.py --html spec.html --config conf.json \
      --out linked.html --xref

Outputs a structured JSON report to stdout, human messages to stderr.
Exit code 1 on input/config errors, 2 with --strict when any reference
is broken or any definition is duplicated.
"""

import argparse
import logging
import sys
from pathlib import Path

from dfnlink.config import LinkConfig, load_link_config
from dfnlink.diagnostics import DiagnosticsCollector
from dfnlink.html_document import apply_outcomes, read_html, scan_html
from dfnlink.io_utils import dump_json, save_json
from dfnlink.link_pass import run_link_pass

log = logging.getLogger("link_definitions")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Resolve <a> references to <dfn> definitions in an HTML document."
    )
    parser.add_argument("--html", required=True, help="Input HTML file")
    parser.add_argument("--out", default=None, help="Write linked HTML here")
    parser.add_argument("--config", default=None, help="Document config JSON (shortName, references)")
    parser.add_argument("--short-name", default=None, help="Override the document short name")
    parser.add_argument(
        "--xref",
        action="store_true",
        help="Defer possibly-external references to a later xref lookup instead of reporting them.",
    )
    parser.add_argument("--report", default=None, help="Also write the JSON report to this path")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with code 2 when any reference is broken or any definition duplicated.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    html_path = Path(args.html)
    if not html_path.exists():
        log.error("Error: HTML file not found at %s", html_path)
        return 1

    try:
        config = load_link_config(Path(args.config)) if args.config else LinkConfig()
    except (OSError, ValueError) as exc:
        log.error("Error: %s", exc)
        return 1
    if args.short_name is not None or args.xref:
        config = LinkConfig(
            short_name=args.short_name if args.short_name is not None else config.short_name,
            xref=config.xref or args.xref,
            lang=config.lang,
            normative_references=config.normative_references,
            informative_references=config.informative_references,
        )

    log.info("Scanning %s", html_path)
    doc = scan_html(read_html(html_path))
    log.info(
        "Found %d definition title(s), %d local reference(s)",
        len(doc.definitions_by_title),
        len(doc.references),
    )

    diagnostics = DiagnosticsCollector()
    report = run_link_pass(
        doc.definitions_by_title, doc.references, config, diagnostics, ids=doc.ids
    )
    apply_outcomes(doc)

    for diag in diagnostics.entries:
        log.warning("%s (%s)", diag.message, diag.summary)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(doc.render(), encoding="utf-8")
        log.info("Wrote linked HTML to %s", out_path)

    payload = {
        "summary": report.summary(),
        "config": config.to_dict(),
        "diagnostics": diagnostics.to_records(),
        "deferred": [
            {"text": ref.text, "outcome": ref.outcome, "label": ref.label}
            for ref in report.deferred
        ],
    }
    if args.report:
        save_json(payload, Path(args.report))
    dump_json(payload)

    if args.strict and (report.broken or report.duplicates):
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
