"""County keys and keyed datasets.

Public API:
  - keys: normalize, variants_of, display_name
  - dataset: CountyDataset, CountyValue
"""

from county_atlas.counties.dataset import CountyDataset, CountyValue
from county_atlas.counties.keys import display_name, normalize, variants_of

__all__ = [
    "CountyDataset",
    "CountyValue",
    "display_name",
    "normalize",
    "variants_of",
]
