from covid_county_forecast.pipeline.main import (
    do_forecast,
    forecast_main,
    run,
)
