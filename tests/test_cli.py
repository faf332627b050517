"""Tests for the command line interface."""

from decimal import Decimal
from uuid import uuid4

from typer.testing import CliRunner

from frameup import __version__
from frameup.cli import app
from frameup.config import settings
from frameup.db.session import create_all, get_session_context
from frameup.domain.pricing import BusinessRules
from frameup.services.projects import BatchOrder, create_batch_project, get_batch_videos

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"FrameUp v{__version__}" in result.output


class TestPricingQuote:
    """Tests for `frameup pricing quote`."""

    def test_batch_quote(self):
        result = runner.invoke(
            app, ["pricing", "quote", "--base-price", "100", "--quantity", "4", "--days", "2"]
        )

        assert result.exit_code == 0
        assert "95.00" in result.output
        assert "437.00" in result.output

    def test_invalid_price(self):
        result = runner.invoke(app, ["pricing", "quote", "--base-price", "abc"])

        assert result.exit_code == 1
        assert "Invalid price" in result.output

    def test_unknown_mode(self):
        result = runner.invoke(
            app, ["pricing", "quote", "--base-price", "100", "--mode", "overnight"]
        )

        assert result.exit_code == 1
        assert "Unknown delivery mode" in result.output


def test_show_rejects_malformed_id() -> None:
    result = runner.invoke(app, ["projects", "show", "not-a-uuid"])

    assert result.exit_code == 1
    assert "Invalid project ID" in result.output


def test_show_by_status_orders_by_workflow_progress() -> None:
    create_all()
    with get_session_context() as session:
        project = create_batch_project(
            session,
            BatchOrder(
                creator_id=uuid4(),
                title="Launch teasers",
                base_price=Decimal("100.00"),
                quantity=4,
                is_batch=True,
            ),
            BusinessRules.from_settings(settings),
        )
        videos = get_batch_videos(session, project.id)
        videos[0].status = "approved"
        videos[1].status = "delivered"
        session.commit()
        project_id = str(project.id)

    result = runner.invoke(app, ["projects", "show", project_id, "--by-status"])

    assert result.exit_code == 0
    positions = [result.output.index(f"Video {n}") for n in (3, 4, 2, 1)]
    assert positions == sorted(positions)
