"""
Global rendering configuration for HTML DSL templates.

Configuration is declared with head-level meta elements and resolved once per
template into an immutable GlobalConfig, which is then passed explicitly to
the schema compiler and the renderer.

    <meta name="timezone" content="Asia/Tokyo">
    <meta name="semantic:examples-delimiter" content="|">
"""

import logging
from collections.abc import Iterator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import inflection
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from htmldsl.core.tree_node import ElementNode
from htmldsl.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_META_NAMES = ("timezone", "semantic:examples-delimiter")


def meta_field_name(meta_name: str) -> str:
    """
    Map a configuration meta name onto its GlobalConfig field.

    Examples:
        "timezone" -> "timezone"
        "semantic:examples-delimiter" -> "examples_delimiter"
    """
    return inflection.underscore(meta_name.rpartition(":")[2])


class GlobalConfig(BaseModel):
    """
    Immutable per-template configuration.

    Params:
        timezone: IANA zone used to display datetime values
        examples_delimiter: Separator for semantic example lists
    """

    model_config = ConfigDict(frozen=True)

    timezone: str = "UTC"
    examples_delimiter: str = ";"

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError("unknown IANA timezone") from None
        return value

    @field_validator("examples_delimiter")
    @classmethod
    def _check_delimiter(cls, value: str) -> str:
        if not value:
            raise ValueError("delimiter must not be empty")
        return value


def walk_elements(root: ElementNode) -> Iterator[ElementNode]:
    """Yield `root` and every descendant element, depth first."""
    yield root
    for child in root.element_children():
        yield from walk_elements(child)


def collect_global_config(root: ElementNode) -> GlobalConfig:
    """
    Resolve global configuration from the meta elements of a template.

    Meta elements with empty content are ignored; when a setting is declared
    more than once the last declaration wins.

    Params:
        root: Root element of a parsed template

    Returns:
        GlobalConfig with defaults for undeclared settings

    Raises:
        ConfigurationError: If a declared value is invalid
    """
    settings: dict[str, str] = {}
    meta_names: dict[str, str] = {}

    for element in walk_elements(root):
        if element.tag_name != "meta":
            continue
        name = element.attributes.get("name", "").strip()
        content = element.attributes.get("content", "").strip()
        if name in CONFIG_META_NAMES and content:
            field = meta_field_name(name)
            settings[field] = content
            meta_names[field] = name

    try:
        config = GlobalConfig(**settings)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0])
        raise ConfigurationError(
            meta_names.get(field, field), settings.get(field, ""), error["msg"]
        ) from e

    logger.debug("Resolved global config %s", config)
    return config
