import click

from covid_county_forecast import pipeline


@click.group()
def ccf():
    """Top level entry point for county case forecasts."""
    pass


ccf.add_command(pipeline.run)
