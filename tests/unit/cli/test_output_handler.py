"""Unit tests for cli.output module."""

import io
from unittest.mock import Mock

import pytest
from rich.console import Console

from src.cli.output import OutputHandler
from src.publisher.models import PublishFailure, PublishOutcome


def create_handler(verbosity=0):
    """OutputHandler whose console writes to a buffer."""
    handler = OutputHandler(verbosity=verbosity, no_color=True)
    handler.console = Console(file=io.StringIO(), no_color=True, width=200, highlight=False)
    return handler


def output_of(handler):
    """Everything the handler printed so far."""
    return handler.console.file.getvalue()


class TestOutputHandlerInit:
    """Test cases for OutputHandler initialization."""

    def test_defaults(self):
        """Default verbosity is 0 with colors enabled."""
        handler = OutputHandler()

        assert handler.verbosity == 0
        assert handler.console.no_color is False

    def test_no_color(self):
        """no_color disables colors."""
        assert OutputHandler(no_color=True).console.no_color is True


class TestOutputHandlerMessages:
    """Test cases for message output methods."""

    def test_success_displays_green_message(self):
        """success() displays message with green checkmark."""
        handler = OutputHandler()
        handler.console = Mock()

        handler.success("Operation completed")

        handler.console.print.assert_called_once_with("[green]✓[/green] Operation completed")

    def test_error_displays_red_message(self):
        """error() displays message with red X."""
        handler = OutputHandler()
        handler.console = Mock()

        handler.error("Something failed")

        handler.console.print.assert_called_once_with("[red]✗[/red] Something failed", style="red")

    def test_markup_in_messages_escaped(self):
        """Square brackets in messages are printed literally."""
        handler = create_handler()

        handler.print("[[Wiki Link]] in [bold]file[/bold]")

        assert "[[Wiki Link]] in [bold]file[/bold]" in output_of(handler)

    @pytest.mark.parametrize("verbosity, expect_info, expect_debug", [
        (0, False, False),
        (1, True, False),
        (2, True, True),
    ])
    def test_verbosity_filters_messages(self, verbosity, expect_info, expect_debug):
        """info() and debug() depend on verbosity."""
        handler = create_handler(verbosity)

        handler.info("info message")
        handler.debug("debug message")

        assert ("info message" in output_of(handler)) is expect_info
        assert ("debug message" in output_of(handler)) is expect_debug

    def test_spinner_context(self):
        """The spinner wraps a block and lets it run."""
        handler = create_handler()
        ran = []

        with handler.spinner("Working..."):
            ran.append(True)

        assert ran == [True]


class TestPublishSummary:
    """Test cases for print_publish_summary."""

    def test_success(self):
        """A clean run reports the published count."""
        handler = create_handler()

        handler.print_publish_summary(PublishOutcome(successful_uploads=3))

        output = output_of(handler)
        assert "Published: 3 page(s)" in output
        assert "Publish completed successfully" in output
        assert "Failed" not in output

    def test_failures_listed(self):
        """Failed pages are listed with their reason."""
        handler = create_handler()
        outcome = PublishOutcome(
            successful_uploads=1,
            failed_files=[PublishFailure(file_name="/vault/b.md", reason="RuntimeError: boom")],
        )

        handler.print_publish_summary(outcome)

        output = output_of(handler)
        assert "Failed: 1 page(s)" in output
        assert "/vault/b.md: RuntimeError: boom" in output
        assert "Publish completed with failures" in output

    def test_nothing_published(self):
        """An empty run says there was nothing to publish."""
        handler = create_handler()

        handler.print_publish_summary(PublishOutcome())

        assert "No pages to publish" in output_of(handler)
