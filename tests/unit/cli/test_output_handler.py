"""Unit tests for cli.output module."""

from unittest.mock import Mock

from src.cli.output import OutputHandler
from src.pipeline.models import BatchSummary, DocumentOutcome


def _printed(handler):
    return [call.args[0] for call in handler.console.print.call_args_list]


class TestOutputHandlerInit:
    """Test cases for OutputHandler initialization."""

    def test_init_default_verbosity_and_color(self):
        """Initialize with default verbosity (0) and color enabled."""
        handler = OutputHandler()

        assert handler.verbosity == 0
        assert handler.console.no_color is False

    def test_init_no_color_true(self):
        """Initialize with no_color=True disables colors."""
        handler = OutputHandler(no_color=True)

        assert handler.console.no_color is True


class TestOutputHandlerMessages:
    """Test cases for message methods and verbosity gating."""

    def test_info_hidden_at_verbosity_0(self):
        """info() prints nothing at verbosity 0."""
        handler = OutputHandler(verbosity=0)
        handler.console = Mock()

        handler.info("details")

        handler.console.print.assert_not_called()

    def test_info_shown_at_verbosity_1(self):
        """info() prints at verbosity 1."""
        handler = OutputHandler(verbosity=1)
        handler.console = Mock()

        handler.info("details")
        handler.debug("more details")

        assert _printed(handler) == ["details"]

    def test_debug_shown_at_verbosity_2(self):
        """debug() prints at verbosity 2."""
        handler = OutputHandler(verbosity=2)
        handler.console = Mock()

        handler.debug("more details")

        assert "more details" in _printed(handler)[0]

    def test_success_error_warning(self):
        """Status messages are always printed."""
        handler = OutputHandler()
        handler.console = Mock()

        handler.success("done")
        handler.error("broken")
        handler.warning("careful")

        printed = _printed(handler)
        assert "done" in printed[0]
        assert "broken" in printed[1]
        assert "careful" in printed[2]


class TestSummaries:
    """Test cases for document and batch summaries."""

    def test_document_summary(self):
        """The document summary shows counts and optional lines."""
        handler = OutputHandler()
        handler.console = Mock()
        outcome = DocumentOutcome(document_path="day.md", images=3, succeeded=3, unresolved=1, trashed=2)

        handler.print_document_summary(outcome, "Uploaded")

        text = "\n".join(_printed(handler))
        assert "day.md" in text
        assert "Uploaded: 3/3 image(s)" in text
        assert "Not found in vault: 1 image(s)" in text
        assert "Moved to trash: 2 file(s)" in text

    def test_batch_summary_success(self):
        """A clean batch ends with the success line."""
        handler = OutputHandler()
        handler.console = Mock()
        summary = BatchSummary(total_documents=2, processed=2, total_images=4, succeeded=4)

        handler.print_batch_summary(summary, "Uploaded")

        text = "\n".join(_printed(handler))
        assert "Documents: 2/2 processed" in text
        assert "Uploaded: 4/4 image(s)" in text
        assert "Batch completed successfully" in text

    def test_batch_summary_failures(self):
        """Failed documents are listed."""
        handler = OutputHandler()
        handler.console = Mock()
        summary = BatchSummary(total_documents=2, processed=2, failed_documents=["a.md"])

        handler.print_batch_summary(summary, "Downloaded")

        text = "\n".join(_printed(handler))
        assert "Failed: 1 document(s)" in text
        assert "a.md" in text
        assert "Batch completed with failures" in text

    def test_batch_summary_empty(self):
        """An empty folder says there was nothing to process."""
        handler = OutputHandler()
        handler.console = Mock()

        handler.print_batch_summary(BatchSummary(), "Uploaded")

        assert "No documents to process" in "\n".join(_printed(handler))
