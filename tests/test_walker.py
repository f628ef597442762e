"""
Tests for viewforge.walker and viewforge.audit
==============================================

Test Organization
-----------------
- TestMain: Tests for compiling and writing a single view
- TestWalk: Tests for directory traversal
- TestAudit: Tests for the external accessibility audit
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from viewforge.audit import run_audit
from viewforge.models import ProjectLayout
from viewforge.walker import main, walk


# =============================================================================
# main() Tests
# =============================================================================

class TestMain:
    """Tests for main function."""

    def test_compiles_and_writes(self, layout: ProjectLayout) -> None:
        """Test a view is compiled into the distribution tree."""
        dist = main(layout.views / "index.twig", layout, audit=False)

        assert dist == layout.dist / "index.html"
        assert "<h1>Acme</h1>" in dist.read_text(encoding="utf-8")

    def test_uppercase_extension(self, layout: ProjectLayout, make_file) -> None:
        """Test a view with an uppercase extension is written as .html."""
        view = make_file(layout.views / "UP.TWIG", "<p>up</p>")

        dist = main(view, layout, audit=False)

        assert dist == layout.dist / "UP.html"
        assert dist.read_text(encoding="utf-8") == "<p>up</p>"

    def test_ignores_non_templates(self, layout: ProjectLayout, make_file) -> None:
        """Test files without the template extension are not built."""
        data = make_file(layout.views / "data.json", "{}")

        assert main(data, layout, audit=False) is None
        assert not (layout.dist / "data.html").exists()
        assert not (layout.dist / "data.json").exists()

    def test_failed_compile_writes_nothing(self, layout: ProjectLayout, make_file) -> None:
        """Test a view that fails to compile produces no artifact."""
        view = make_file(layout.views / "bad.twig", "{% if %}")

        with patch("viewforge.compiler.console.error"):
            assert main(view, layout, audit=False) is None

        assert not (layout.dist / "bad.html").exists()

    def test_audit_runs_on_written_file(self, layout: ProjectLayout) -> None:
        """Test the audit receives the written artifact and command."""
        with patch("viewforge.walker.run_audit") as audit:
            dist = main(layout.views / "index.twig", layout)

        audit.assert_called_once_with(dist, ("pa11y",))

    def test_audit_disabled(self, layout: ProjectLayout) -> None:
        """Test audit=False skips the audit."""
        with patch("viewforge.walker.run_audit") as audit:
            main(layout.views / "index.twig", layout, audit=False)

        audit.assert_not_called()


# =============================================================================
# walk() Tests
# =============================================================================

class TestWalk:
    """Tests for walk function."""

    def test_reverse_order(self, layout: ProjectLayout, make_file) -> None:
        """Test entries are built last name first."""
        (layout.views / "index.twig").unlink()
        for name in ("a", "b", "c"):
            make_file(layout.views / f"{name}.twig", name)

        written = walk(layout.views, layout, audit=False)

        assert [p.name for p in written] == ["c.html", "b.html", "a.html"]

    def test_nested_views(self, layout: ProjectLayout, make_file) -> None:
        """Test sub-directories keep their nesting in the output."""
        make_file(layout.views / "newsletter" / "index.twig", "<p>news</p>")

        written = walk(layout.views, layout, audit=False)

        news = layout.dist / "newsletter" / "index.html"
        assert news in written
        assert news.read_text(encoding="utf-8") == "<p>news</p>"
        assert (layout.dist / "index.html").exists()

    def test_relative_target(self, layout: ProjectLayout) -> None:
        """Test a target name is resolved against the views directory."""
        assert walk("index.twig", layout, audit=False) == [layout.dist / "index.html"]

    def test_skips_data_files(self, layout: ProjectLayout, make_file) -> None:
        """Test non-view files beside views are skipped silently."""
        make_file(layout.views / "accordion" / "extra.json", "{}")

        written = walk(layout.views, layout, audit=False)

        assert written == [layout.dist / "index.html"]
        assert not (layout.dist / "accordion").exists()

    def test_rebuild_is_byte_identical(self, layout: ProjectLayout) -> None:
        """Test rebuilding unchanged sources rewrites the same bytes."""
        walk(layout.views, layout, audit=False)
        first = (layout.dist / "index.html").read_bytes()
        walk(layout.views, layout, audit=False)

        assert (layout.dist / "index.html").read_bytes() == first

    def test_failing_view_does_not_stop_walk(self, layout: ProjectLayout, make_file) -> None:
        """Test siblings are still written when one view fails."""
        make_file(layout.views / "bad.twig", "{% for %}")
        make_file(layout.views / "good.twig", "<p>good</p>")

        with patch("viewforge.compiler.console.error"):
            written = walk(layout.views, layout, audit=False)

        assert [p.name for p in written] == ["index.html", "good.html"]
        assert not (layout.dist / "bad.html").exists()

    def test_missing_directory(self, layout: ProjectLayout) -> None:
        """Test an unreadable directory is reported and yields nothing."""
        with patch("viewforge.walker.console.error") as error:
            assert walk(layout.views / "nope", layout, audit=False) == []

        error.assert_called_once()


# =============================================================================
# Audit Tests
# =============================================================================

class TestAudit:
    """Tests for run_audit function."""

    def test_missing_tool_is_skipped(self, tmp_path: Path) -> None:
        """Test a missing auditor is a notice, not an error."""
        with patch("viewforge.audit.subprocess.run", side_effect=FileNotFoundError), \
                patch("viewforge.audit.console.notify") as notify:
            assert run_audit(tmp_path / "index.html") is False

        notify.assert_called_once()
        assert "pa11y" in notify.call_args.args[0]

    def test_failure_reported(self, tmp_path: Path) -> None:
        """Test auditor issues are reported with its output."""
        failure = subprocess.CalledProcessError(2, ["pa11y"], output="contrast issue", stderr="")

        with patch("viewforge.audit.subprocess.run", side_effect=failure), \
                patch("viewforge.audit.console.error") as error:
            assert run_audit(tmp_path / "index.html") is False

        assert "contrast issue" in error.call_args.args[0]

    def test_success(self, tmp_path: Path) -> None:
        """Test a clean audit passes the page path to the command."""
        result = MagicMock(stdout="", stderr="")
        page = tmp_path / "index.html"

        with patch("viewforge.audit.subprocess.run", return_value=result) as run, \
                patch("viewforge.audit.console.success"):
            assert run_audit(page, ("npx", "pa11y")) is True

        assert run.call_args.args[0] == ["npx", "pa11y", str(page)]
