"""County Atlas - county-level income and health data for choropleths and scatter plots.

Architecture::

    datasources/   Raw inputs: CSV extracts (tables/) and county boundaries (geometry/)
    counties/      Name normalization and keyed, read-only county datasets
    analysis/      Geographic join, regression/correlation, trend summaries
    store.py       On-disk cache with TTL (reference → sources → derived)
    flows/         Prefect orchestration (fetch fills the store, build writes JSON)
    services/      Shared HTTP client with retry

Data flow: raw text → parse_records → CountyDataset → join_features / analyze
→ derived/*.json (consumed by the rendering layer).
"""

__version__ = "0.1.0"

from county_atlas.analysis import (  # noqa: E402
    CorrelationResult,
    JoinResult,
    analyze,
    join_features,
)
from county_atlas.config import Settings  # noqa: E402
from county_atlas.counties import CountyDataset, normalize, variants_of  # noqa: E402
from county_atlas.datasources.tables import ParseOptions, parse_records  # noqa: E402
from county_atlas.errors import (  # noqa: E402
    DegenerateInputError,
    JoinDataQualityWarning,
    ParseError,
)

__all__ = [
    "CorrelationResult",
    "CountyDataset",
    "DegenerateInputError",
    "JoinDataQualityWarning",
    "JoinResult",
    "ParseError",
    "ParseOptions",
    "Settings",
    "__version__",
    "analyze",
    "join_features",
    "normalize",
    "parse_records",
    "variants_of",
]
