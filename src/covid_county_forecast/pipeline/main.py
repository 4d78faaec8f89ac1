from pathlib import Path
from typing import Optional

import click
from loguru import logger

from covid_county_forecast.lib import (
    cli_tools,
    static_vars,
)
from covid_county_forecast.pipeline.data import ForecastDataInterface
from covid_county_forecast.pipeline.specification import ForecastSpecification
from covid_county_forecast.pipeline import model

perf_logger = cli_tools.task_performance_logger


def do_forecast(specification: ForecastSpecification,
                output_root: Optional[str],
                with_debugger: bool) -> Path:
    """Resolve the output location, configure file logging and run."""
    output_root = cli_tools.get_output_root(output_root, specification.data.output_root)
    run_directory = cli_tools.make_run_directory(output_root)
    specification.data.output_root = str(run_directory)

    cli_tools.configure_logging_to_files(run_directory)
    main = cli_tools.handle_exceptions(forecast_main, logger, with_debugger)
    report_path = main(specification)

    specification.dump(run_directory / static_vars.FORECAST_SPECIFICATION_FILE)
    return report_path


def forecast_main(specification: ForecastSpecification) -> Path:
    logger.info(f'Starting forecast run in {specification.data.output_root}.')
    data_interface = ForecastDataInterface.from_specification(specification)

    perf_logger.info('Loading source data.', context='read')
    cases, area, population, masks = data_interface.load_all()

    perf_logger.info('Joining sources and building features.', context='transform')
    joined = model.join_sources(cases, area, population, masks)
    features = specification.features
    data = model.build_features(
        joined,
        rolling_window=features.rolling_window,
        forecast_horizon=features.forecast_horizon,
        mask_weights=features.mask_weights,
        excluded_states=features.excluded_states,
    )
    logger.info(f'{len(data)} modelling rows from {data[static_vars.COL_FIPS].nunique()} counties.')

    # Each model gets its own stream so the two holdouts are independent draws.
    linear_rng, tree_rng = model.spawn_generators(specification.random_seed, 2)
    linear_summary = model.fit_linear_model(
        data,
        test_fraction=specification.linear.test_fraction,
        rng=linear_rng,
    )
    logger.info(f'Linear model test RMSE {linear_summary.test_rmse:,.1f}, '
                f'adjusted R squared {linear_summary.adjusted_r_squared:.4f}.')

    tree_spec = specification.tree
    tree_summary = model.fit_tree_model(
        data,
        test_fraction=tree_spec.test_fraction,
        rng=tree_rng,
        min_samples_split=tree_spec.min_samples_split,
        min_samples_leaf=tree_spec.min_samples_leaf,
        max_depth=tree_spec.max_depth,
        complexity=tree_spec.complexity,
    )
    logger.info(f'Regression tree test RMSE {tree_summary.test_rmse:,.1f}, '
                f'splits on {tree_summary.features_used}.')

    report_path = model.render_report(data, linear_summary, tree_summary,
                                      specification.data.output_root)
    perf_logger.report()
    logger.info(f'Report written to {report_path}.')
    return report_path


@click.command()
@cli_tools.with_specification(ForecastSpecification)
@cli_tools.with_output_root
@cli_tools.add_verbose_and_with_debugger
def run(specification: ForecastSpecification,
        output_root: Optional[str],
        verbose: int, with_debugger: bool):
    """Fetch the source data, fit both models and render the report."""
    cli_tools.configure_logging_to_terminal(verbose)
    do_forecast(
        specification=specification,
        output_root=output_root,
        with_debugger=with_debugger,
    )

    logger.info('**Done**')
