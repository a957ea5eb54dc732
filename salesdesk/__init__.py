import os
import logging

import click
from flask import Flask, jsonify

from salesdesk.config import config_by_name
from salesdesk.extensions import db


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)

    # --- Create the in-memory store, then load the fixture once ---
    with app.app_context():
        from salesdesk import models  # noqa: F401

        db.create_all()
        if app.config["SEED_DEMO_DATA"]:
            from salesdesk.seed import seed_demo_data
            seed_demo_data()

    # --- Register blueprints ---
    from salesdesk.blueprints.dashboard import dashboard_bp
    from salesdesk.blueprints.kanban import kanban_bp
    from salesdesk.blueprints.settings import settings_bp

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(kanban_bp)
    app.register_blueprint(settings_bp)

    # --- Root route ---
    @app.route("/")
    def index():
        """Entry points of the JSON API."""
        return jsonify({
            "sales": "/api/sales",
            "strategic": "/api/dashboard/strategic",
            "performance": "/api/dashboard/performance",
            "kanban": "/kanban/api/board",
            "settings": "/settings/api/units",
        })

    # --- Error handlers ---
    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": "Bad request"}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({"error": "Internal server error"}), 500

    # --- CLI commands ---
    register_cli(app)

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("pipeline-report")
    @click.option("--goal", type=float, default=None, help="Monthly goal to measure against.")
    def pipeline_report(goal):
        """Print the strategic dashboard numbers for the loaded store.

        Usage:
            flask pipeline-report
            flask pipeline-report --goal 75000
        """
        from salesdesk.services import goal_service, metrics_service, sales_service

        if goal is not None:
            goal_service.set_monthly_goal(goal)

        summary = metrics_service.strategic_summary(
            sales_service.list_sales(), goal_service.get_monthly_goal()
        )

        click.echo("")
        click.echo("=" * 60)
        click.echo("Pipeline report")
        click.echo("=" * 60)
        click.echo(f"  Monthly goal:     {summary['monthly_goal']:,.2f}")
        click.echo(f"  This month:       {summary['current_month_revenue']:,.2f}"
                   f" ({summary['goal_progress']:.1f}%, {summary['goal_band']})")
        click.echo(f"  Total revenue:    {summary['total_revenue']:,.2f}")
        click.echo(f"  Pipeline value:   {summary['pipeline_value']:,.2f}")
        click.echo(f"  Conversion rate:  {summary['conversion_rate']:.1f}%")
        click.echo(f"  Average ticket:   {summary['average_ticket']:,.2f}")
        click.echo("")
        click.echo("  Funnel:")
        for step in summary["funnel"]:
            click.echo(f"    {step['stage']:<12} {step['count']:>4}  {step['value']:>12,.2f}")
        click.echo("")
        click.echo("  Units:")
        for unit in summary["units"]:
            click.echo(f"    #{unit['rank']} {unit['name']:<20} {unit['revenue']:>12,.2f}")
        click.echo("=" * 60)

