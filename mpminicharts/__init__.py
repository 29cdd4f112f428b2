"""
isort:skip_file
"""

from .ChartType import ChartType as ChartType
from .ChartOptions import ChartOptions as ChartOptions
from .ChartBatch import ChartBatch as ChartBatch
from .ScaleResolver import Scale as Scale
from .ScaleResolver import resolve_scale as resolve_scale
from .ColorManager import ColorManager as ColorManager
from .ChartGeometry import ChartGeometry as ChartGeometry
from .ChartGeometry import build_geometry as build_geometry
from .OverlayEntry import OverlayEntry as OverlayEntry
from .MinichartRenderer import MinichartRenderer as MinichartRenderer
from .OverlayRegistry import OverlayRegistry as OverlayRegistry
from .utils import proportional_sizes as proportional_sizes
from .exceptions import MinichartsError as MinichartsError
from .exceptions import MalformedBatchError as MalformedBatchError
from .exceptions import UnknownLayerError as UnknownLayerError
from .exceptions import MissingLayerIdError as MissingLayerIdError
