"""Walk a source tree and generate option modules for annotated records."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import TcogenConfig, load_config
from .emitter import OptionsEmitter
from .errors import NameCollisionError, OutputWriteError
from .logging import get_logger
from .render import render
from .scanner import DirectiveScanner
from .source import parse_source
from .walker import CODEGEN_SUFFIX, SOURCE_SUFFIX, iter_source_files, load_ignore_rules


@dataclass
class GenerationOutcome:
    """Result of generating the companion module for one source file."""

    source: Path
    output: Path
    records: List[str]
    written: bool
    diff: str = ""


def output_path_for(source: Path) -> Path:
    """Return the sibling path that receives the module generated from ``source``."""
    return source.with_name(source.name[: -len(SOURCE_SUFFIX)] + CODEGEN_SUFFIX)


class Orchestrator:
    """Coordinates parsing, scanning, emission and writing across a tree."""

    def __init__(
        self,
        scanner: DirectiveScanner | None = None,
        emitter: OptionsEmitter | None = None,
    ) -> None:
        self.scanner = scanner or DirectiveScanner()
        self.emitter = emitter or OptionsEmitter()
        self.logger = get_logger("orchestrator")

    def run(
        self,
        root: str,
        *,
        config: TcogenConfig | None = None,
        dry_run: bool = False,
    ) -> List[GenerationOutcome]:
        """Generate option modules for every annotated record under ``root``.

        The first parse or write failure aborts the run; files written before
        it stay on disk. A source file whose generated names collide is
        skipped with a warning.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        if config is None:
            config = load_config(root_path)
        rules = load_ignore_rules(root_path, config.exclude_paths)
        self.logger.debug("Scanning %s", root_path)

        outcomes: List[GenerationOutcome] = []
        for path in iter_source_files(root_path, rules, config.skip_suffixes):
            outcome = self.process_file(path, dry_run=dry_run)
            if outcome is not None:
                outcomes.append(outcome)
        self.logger.debug("Generated %d module(s)", len(outcomes))
        return outcomes

    def process_file(self, path: Path, *, dry_run: bool = False) -> Optional[GenerationOutcome]:
        """Run the pipeline for one file.

        Returns None when the file has no annotated records or when its
        generated names collide.
        """
        source = parse_source(path)
        records = self.scanner.scan(source)
        if not records:
            self.logger.debug("No annotated records in %s", path)
            return None

        output = output_path_for(path)
        for record in records:
            self.logger.info("Found %s.%s; generating %s...", source.module_name, record.name, output)
        names = [record.name for record in records]
        try:
            generated = self.emitter.build_file(source, records, output)
        except NameCollisionError as exc:
            self.logger.warning("Skipping %s (%s): %s", path, ", ".join(names), exc)
            return None
        text = render(generated)

        if dry_run:
            diff = self._diff(output, text)
            if diff:
                self.logger.info("%s would change:\n%s", output, diff)
            else:
                self.logger.info("%s is up to date", output)
            return GenerationOutcome(source=path, output=output, records=names, written=False, diff=diff)

        try:
            output.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise OutputWriteError(output, exc) from exc
        return GenerationOutcome(source=path, output=output, records=names, written=True)

    @staticmethod
    def _diff(output: Path, text: str) -> str:
        try:
            current = output.read_text(encoding="utf-8")
        except FileNotFoundError:
            current = ""
        return "".join(
            difflib.unified_diff(
                current.splitlines(keepends=True),
                text.splitlines(keepends=True),
                fromfile=f"{output} (current)",
                tofile=f"{output} (generated)",
            )
        )


__all__ = ["GenerationOutcome", "Orchestrator", "output_path_for"]
