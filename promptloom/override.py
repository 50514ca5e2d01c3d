"""
Override - deployment-time customization of built-in prompt files.

For a logical file ``persona/default.md`` under the override directory:

- ``persona/default-pre.md`` is parsed and prepended to the built-in section,
- ``persona/default-post.md`` is parsed and appended to it,
- ``persona/default.md`` replaces it entirely, but only when overrides are
  explicitly enabled. Without that flag its presence is an error.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .constants import DEFAULT_OVERRIDE_DIR, OVERRIDE_POST_SUFFIX, OVERRIDE_PRE_SUFFIX
from .formatter import Formatter
from .items.parameters import Parameters, merge
from .items.section import Section
from .items.weighted import Weighted
from .logger import wrap_logger
from .parser import Parser
from .util.storage import PathLike, Storage


class CoreOverrideDisabledError(Exception):
    """Raised when a full override file exists but overrides are not enabled."""

    def __init__(self, path: PathLike):
        self.path = path
        super().__init__(
            f"Core directives would be overwritten by {path}, but overrides are not enabled. "
            "Enable overrides (--overrides) to use this file."
        )


@dataclass
class OverrideResult:
    """Sections found for a logical override file."""
    override: Optional[Section] = None
    prepend: Optional[Section] = None
    append: Optional[Section] = None

    @property
    def is_empty(self) -> bool:
        return self.override is None and self.prepend is None and self.append is None


def override_paths(config_dir: PathLike, name: str) -> tuple[Path, Path, Path]:
    """Return the (pre, post, base) paths for a logical file name."""
    base = Path(config_dir) / name
    pre = base.with_name(f"{base.stem}{OVERRIDE_PRE_SUFFIX}{base.suffix}")
    post = base.with_name(f"{base.stem}{OVERRIDE_POST_SUFFIX}{base.suffix}")
    return pre, post, base


class Override:
    """Resolves and applies override files.

    Example:
        override = Override(config_dir="./overrides")
        section = await override.customize("persona/default.md", section)
    """

    def __init__(
        self,
        config_dir: PathLike = DEFAULT_OVERRIDE_DIR,
        overrides: bool = False,
        parameters: Optional[Parameters] = None,
        logger: Any = None,
        storage: Optional[Storage] = None,
    ) -> None:
        """Initialize the Override.

        Args:
            config_dir: Root directory holding override files.
            overrides: Whether full replacement files are allowed.
            parameters: Placeholder values for parsed override files.
            logger: Optional logger.
            storage: Filesystem collaborator.
        """
        self._config_dir = config_dir
        self._overrides = overrides
        self._parameters: Parameters = dict(parameters or {})
        self._logger = wrap_logger(logger, "Override")
        self._storage = storage or Storage(log=self._logger.debug)
        self._parser = Parser(logger=self._logger.target, storage=self._storage)

    @property
    def config_dir(self) -> PathLike:
        return self._config_dir

    @property
    def overrides(self) -> bool:
        return self._overrides

    async def override(
        self,
        name: str,
        section: Section,
        title: Optional[str] = None,
        weight: Optional[float] = None,
        item_weight: Optional[float] = None,
        parameters: Optional[Parameters] = None,
        item_type: type = Weighted,
    ) -> OverrideResult:
        """Find the override files for ``name`` and parse the ones present.

        Args:
            name: Logical file name relative to the override directory.
            section: The built-in section being customized. Left untouched.
            title, weight, item_weight, parameters, item_type: Parse options
                for the override files.

        Returns:
            An OverrideResult; empty when no override file exists.

        Raises:
            CoreOverrideDisabledError: If the full override file exists and
                overrides are not enabled.
        """
        pre_file, post_file, base_file = override_paths(self._config_dir, name)

        has_pre = await self._storage.exists(pre_file)
        has_post = await self._storage.exists(post_file)
        has_base = await self._storage.exists(base_file)

        if has_base and not self._overrides:
            self._logger.error(f"Core directives are being overwritten by {base_file}")
            raise CoreOverrideDisabledError(base_file)

        options = {
            "title": title,
            "weight": weight,
            "item_weight": item_weight,
            "parameters": merge(self._parameters, parameters),
            "item_type": item_type,
        }
        result = OverrideResult()

        if has_pre:
            self._logger.debug(f"Found pre file {pre_file}")
            result.prepend = await self._parser.parse_file(pre_file, **options)

        if has_post:
            self._logger.debug(f"Found post file {post_file}")
            result.append = await self._parser.parse_file(post_file, **options)

        if has_base:
            self._logger.warning(
                f"Core directives are being overwritten by custom configuration in {base_file}"
            )
            result.override = await self._parser.parse_file(base_file, **options)

        return result

    async def customize(
        self,
        name: str,
        section: Section,
        title: Optional[str] = None,
        weight: Optional[float] = None,
        item_weight: Optional[float] = None,
        parameters: Optional[Parameters] = None,
        item_type: type = Weighted,
    ) -> Section:
        """Apply the override files for ``name`` to ``section``.

        A full override replaces the section, then the pre file is prepended
        and the post file appended.

        Returns:
            The customized section; ``section`` itself when only pre/post
            files (or none) exist.

        Raises:
            CoreOverrideDisabledError: If the full override file exists and
                overrides are not enabled.
        """
        result = await self.override(
            name, section,
            title=title,
            weight=weight,
            item_weight=item_weight,
            parameters=parameters,
            item_type=item_type,
        )
        final = section

        if result.override is not None:
            if not self._overrides:
                self._logger.error(f"Core directives are being overwritten for {name}")
                raise CoreOverrideDisabledError(Path(self._config_dir) / name)
            self._logger.warning(f"Override found, replacing content for {name}")
            final = result.override

        if result.prepend is not None:
            self._logger.debug(f"Prepend found, adding to content for {name}")
            final.prepend(result.prepend)

        if result.append is not None:
            self._logger.debug(f"Append found, adding to content for {name}")
            final.append(result.append)

        if not result.is_empty:
            formatter = Formatter(logger=self._logger.target)
            self._logger.debug(f"Final section for {name}:\n\n{formatter.format(final)}\n")

        return final
