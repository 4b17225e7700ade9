"""
Build converters from a ConverterSpec, a spec dict or a JSON file.
"""

import logging
from typing import Any, Dict, Union

from .base_converter import BaseConverter
from .drums_converter import DrumsConverter, DrumRollConverter
from .melody_converter import MelodyConverter
from ..configs.converter_config import ConverterSpec, ConverterType
from ..core.errors import UnknownConverterTypeError

logger = logging.getLogger(__name__)


def converter_from_spec(spec: Union[ConverterSpec, Dict[str, Any]]) -> BaseConverter:
    """
    Build a converter based on the given spec.

    Args:
        spec: ConverterSpec, or a dict like
              {'type': 'MelodyConverter', 'args': {'num_steps': 32, ...}}

    Returns:
        New converter instance

    Raises:
        UnknownConverterTypeError: If the type is not recognized
    """
    if not isinstance(spec, ConverterSpec):
        spec = ConverterSpec.from_dict(spec)

    logger.debug("Building %s", spec.type.value)

    if spec.type is ConverterType.MELODY:
        return MelodyConverter.from_config(spec.args)
    elif spec.type is ConverterType.DRUMS:
        return DrumsConverter.from_config(spec.args)
    elif spec.type is ConverterType.DRUM_ROLL:
        return DrumRollConverter.from_config(spec.args)
    else:
        raise UnknownConverterTypeError(spec.type)


def converter_from_config(config_path: str) -> BaseConverter:
    """Build a converter from a JSON spec or checkpoint config file."""
    return converter_from_spec(ConverterSpec.load(config_path))
