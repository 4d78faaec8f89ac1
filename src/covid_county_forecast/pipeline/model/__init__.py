from covid_county_forecast.pipeline.model.keys import (
    make_county_fips,
    normalize_fips,
)
from covid_county_forecast.pipeline.model.join import (
    join_sources,
)
from covid_county_forecast.pipeline.model.features import (
    build_features,
)
from covid_county_forecast.pipeline.model.partition import (
    Partition,
    partition,
    spawn_generators,
)
from covid_county_forecast.pipeline.model.linear import (
    LinearModelSummary,
    fit_linear_model,
)
from covid_county_forecast.pipeline.model.tree import (
    TreeModelSummary,
    fit_tree_model,
)
from covid_county_forecast.pipeline.model.report import (
    render_report,
)
