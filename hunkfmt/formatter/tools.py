"""Concrete formatters.

Contains:
- Autopep8Formatter, YapfFormatter, BlackFormatter
- create_formatter: Build the configured formatter
"""

from typing import Optional

from hunkfmt.config import FormatterId, FormattingConfig, get_formatter_settings
from hunkfmt.formatter.artifacts import Document
from hunkfmt.formatter.base import BaseFormatter, Notifier
from hunkfmt.formatter.cancellation import CancellationToken
from hunkfmt.formatter.runner import PythonToolRunner
from hunkfmt.patch import Range, TextEdit


def _has_selection(range: Optional[Range]) -> bool:
    return range is not None and not range.is_empty


class Autopep8Formatter(BaseFormatter):
    formatter_id = FormatterId.AUTOPEP8

    async def format_document(
        self,
        document: Document,
        token: Optional[CancellationToken] = None,
        range: Optional[Range] = None,
    ) -> list[TextEdit]:
        args = ["--diff"]
        if _has_selection(range):
            args.extend(["--line-range", str(range.start.line + 1), str(range.end.line + 1)])
        return await self.provide_document_formatting_edits(document, token, args)


class YapfFormatter(BaseFormatter):
    formatter_id = FormatterId.YAPF

    async def format_document(
        self,
        document: Document,
        token: Optional[CancellationToken] = None,
        range: Optional[Range] = None,
    ) -> list[TextEdit]:
        args = ["--diff"]
        if _has_selection(range):
            args.append(f"--lines={range.start.line + 1}-{range.end.line + 1}")
        return await self.provide_document_formatting_edits(document, token, args)


class BlackFormatter(BaseFormatter):
    formatter_id = FormatterId.BLACK

    async def format_document(
        self,
        document: Document,
        token: Optional[CancellationToken] = None,
        range: Optional[Range] = None,
    ) -> list[TextEdit]:
        if _has_selection(range):
            self.notifier('Black does not support the "Format Selection" command', "warning")
            return []
        return await self.provide_document_formatting_edits(document, token, ["--diff", "--quiet"])


_FORMATTERS: dict[FormatterId, type[BaseFormatter]] = {
    FormatterId.AUTOPEP8: Autopep8Formatter,
    FormatterId.YAPF: YapfFormatter,
    FormatterId.BLACK: BlackFormatter,
}


def create_formatter(
    config: FormattingConfig,
    formatter: Optional[FormatterId] = None,
    *,
    runner: Optional[PythonToolRunner] = None,
    notifier: Optional[Notifier] = None,
) -> BaseFormatter:
    """Build a formatter from explicit configuration.

    Args:
        config: Loaded configuration.
        formatter: Formatter to build. Defaults to config.formatter.
        runner: Process runner override.
        notifier: Status message callback.

    Raises:
        ValueError: If the formatter is not supported.
    """
    formatter = formatter or config.formatter
    formatter_cls = _FORMATTERS.get(formatter)
    if formatter_cls is None:
        raise ValueError(f"Unsupported formatter: {formatter}")

    return formatter_cls(
        get_formatter_settings(config, formatter),
        python_path=config.python_path,
        workspace_root=config.workspace_root,
        runner=runner,
        notifier=notifier,
    )
