"""
Flask CLI Commands
Run with: flask storefront init, flask storefront reset-usage, etc.
"""

import click
from flask.cli import with_appcontext

from storefront.db_init import init_database, clear_database
from storefront.services.subscription import SubscriptionManager


@click.group()
def storefront_commands():
    """Storefront management commands"""
    pass


@storefront_commands.command('init')
@click.option('--no-sample-data', is_flag=True, help='Skip creating sample data')
@with_appcontext
def init_db_command(no_sample_data):
    """Create tables, default settings and optional sample data"""
    init_database(with_sample_data=not no_sample_data)
    click.echo('Database initialized successfully!')


@storefront_commands.command('clear')
@click.confirmation_option(prompt='This will delete all data. Are you sure?')
@with_appcontext
def clear_db_command():
    """Drop and recreate all tables"""
    clear_database()
    click.echo('Database cleared successfully!')


@storefront_commands.command('reset-usage')
@with_appcontext
def reset_usage_command():
    """Reset monthly km and space usage for every member"""
    updated = SubscriptionManager.reset_monthly_counters()
    click.echo(f'Reset monthly usage for {updated} members')


def register_commands(app):
    """Register CLI commands with the Flask app"""
    app.cli.add_command(storefront_commands, name='storefront')
