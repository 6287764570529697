"""HTML report of a finished run, rendered with Jinja2."""

from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from suitest.config import RunnerConfig
from suitest.core.models import RunContext, TaskStatus


class ReportGenerator:
    """Generates a static HTML report from a finished run."""

    def __init__(self, config: RunnerConfig, base_dir: Optional[Path] = None):
        """Set up the template environment.

        Args:
            config: Run configuration
            base_dir: Directory the report output_dir is relative to (default: root_dir)
        """
        self.config = config
        self.base_dir = base_dir if base_dir is not None else config.root_path

        template_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

        self.env.filters["duration_format"] = self._format_duration
        self.env.filters["datetime_format"] = self._format_datetime
        self.env.filters["percentage"] = self._format_percentage

    def generate(self, ctx: RunContext) -> Path:
        """Render the report and write it to the configured location.

        Returns:
            Path to the generated report file
        """
        context = self._prepare_context(ctx)

        template = self.env.get_template("report.html")
        html_content = template.render(**context)

        output_dir = self.base_dir / self.config.report.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)

        report_path = output_dir / self.config.report.filename
        report_path.write_text(html_content, encoding="utf-8")

        return report_path

    def _prepare_context(self, ctx: RunContext) -> dict[str, Any]:
        """Prepare context for template rendering."""
        total = len(ctx.tasks)
        passed = ctx.count(TaskStatus.PASS)
        executed = passed + ctx.count(TaskStatus.FAIL)
        pass_rate = (passed / executed * 100) if executed > 0 else 0

        files = []
        for file in ctx.files:
            files.append(
                {
                    "path": self._relative(file.filepath),
                    "error": repr(file.error) if file.error is not None else None,
                    "suites": [s.to_dict() for s in file.suites],
                }
            )

        return {
            "title": self.config.report.title,
            "generated_at": datetime.now(),
            "mode": ctx.mode,
            "total": total,
            "passed": passed,
            "failed": ctx.count(TaskStatus.FAIL),
            "skipped": ctx.count(TaskStatus.SKIP),
            "todo": ctx.count(TaskStatus.TODO),
            "pass_rate": pass_rate,
            "duration_ms": sum(t.duration_ms for t in ctx.tasks),
            "files": files,
            "has_failures": ctx.has_failures,
        }

    def _relative(self, filepath: str) -> str:
        try:
            return str(Path(filepath).relative_to(self.config.root_path))
        except ValueError:
            return filepath

    @staticmethod
    def _format_duration(ms: int) -> str:
        """Render a task or run duration given in milliseconds."""
        if ms <= 0:
            return "<1ms"
        if ms < 1000:
            return f"{ms}ms"
        seconds = ms / 1000
        if seconds < 60:
            return f"{seconds:.2f}s"
        minutes, rest = divmod(seconds, 60)
        return f"{int(minutes)}m {rest:.1f}s"

    @staticmethod
    def _format_datetime(dt: datetime) -> str:
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def _format_percentage(value: float) -> str:
        return f"{value:.1f}%"
