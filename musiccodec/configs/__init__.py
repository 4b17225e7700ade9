from .converter_config import (
    ConverterType,
    ConverterSpec,
    DrumsConverterConfig,
    MelodyConverterConfig,
)
