"""
Builder - assembles a Prompt from files, directories and inline text.

The Builder owns the four prompt areas and wires together the Parser,
Override and Loader components. Every ``add_*`` and ``load_*`` method is
a coroutine returning the builder, so calls can be chained one await at a
time.
"""

from pathlib import Path
from typing import Any, Optional, Sequence, Union

from .config import BuilderConfig
from .constants import (
    DEFAULT_CONTENTS_AREA_TITLE,
    DEFAULT_CONTEXT_AREA_TITLE,
    DEFAULT_INSTRUCTIONS_AREA_TITLE,
    DEFAULT_OVERRIDE_DIR,
    DEFAULT_PERSONA_AREA_TITLE,
)
from .items.parameters import Parameters
from .items.section import Section
from .items.weighted import Content, Context, Instruction
from .loader import Loader
from .logger import wrap_logger
from .override import Override
from .parser import Parser
from .prompt import Prompt
from .util.storage import PathLike, Storage


class Builder:
    """Fluent prompt assembly.

    Example:
        builder = Builder(base_path="./prompts", parameters={"product": "Atlas"})
        await builder.add_persona_path("persona/default.md")
        await builder.add_instruction_path("instructions/review.md")
        await builder.load_context(["./context/product"])
        await builder.add_content(diff_text, title="Diff")
        prompt = await builder.build()
    """

    def __init__(
        self,
        base_path: PathLike = ".",
        override_path: PathLike = DEFAULT_OVERRIDE_DIR,
        overrides: bool = False,
        parameters: Optional[Parameters] = None,
        logger: Any = None,
        storage: Optional[Storage] = None,
    ) -> None:
        self._base_path = base_path
        self._parameters: Parameters = dict(parameters or {})
        self._logger = wrap_logger(logger, "Builder")
        target = self._logger.target
        storage = storage or Storage(log=self._logger.debug)

        self._parser = Parser(parameters=self._parameters, logger=target, storage=storage)
        self._override = Override(
            config_dir=override_path,
            overrides=overrides,
            parameters=self._parameters,
            logger=target,
            storage=storage,
        )
        self._loader = Loader(parameters=self._parameters, logger=target, storage=storage)

        self.persona: Section = Section(
            title=DEFAULT_PERSONA_AREA_TITLE, parameters=self._parameters, item_type=Instruction
        )
        self.instructions: Section = Section(
            title=DEFAULT_INSTRUCTIONS_AREA_TITLE, parameters=self._parameters, item_type=Instruction
        )
        self.contents: Section = Section(
            title=DEFAULT_CONTENTS_AREA_TITLE, parameters=self._parameters, item_type=Content
        )
        self.contexts: Section = Section(
            title=DEFAULT_CONTEXT_AREA_TITLE, parameters=self._parameters, item_type=Context
        )

    @classmethod
    def from_config(cls, config: BuilderConfig, logger: Any = None,
                    storage: Optional[Storage] = None) -> "Builder":
        return cls(
            base_path=config.base_path,
            override_path=config.override_path,
            overrides=config.overrides,
            parameters=config.parameters,
            logger=logger,
            storage=storage,
        )

    async def _load_path(self, content_path: str, item_type: type) -> Section:
        self._logger.debug(f"Loading path {content_path}")
        section = await self._parser.parse_file(Path(self._base_path) / content_path, item_type=item_type)
        return await self._override.customize(content_path, section, item_type=item_type)

    async def add_persona_path(self, content_path: str) -> "Builder":
        self.persona.append(await self._load_path(content_path, Instruction))
        return self

    async def add_instruction_path(self, content_path: str) -> "Builder":
        self.instructions.append(await self._load_path(content_path, Instruction))
        return self

    async def add_content_path(self, content_path: str) -> "Builder":
        self.contents.append(await self._load_path(content_path, Content))
        return self

    async def add_context_path(self, content_path: str) -> "Builder":
        self.contexts.append(await self._load_path(content_path, Context))
        return self

    async def add_content(self, content: Union[str, bytes], title: Optional[str] = None) -> "Builder":
        """Parse inline content and add it to the content area."""
        self._logger.debug("Adding content")
        self.contents.append(self._parser.parse(content, title=title, item_type=Content))
        return self

    async def add_context(self, context: Union[str, bytes], title: Optional[str] = None) -> "Builder":
        """Parse inline context and add it to the context area."""
        self._logger.debug("Adding context")
        self.contexts.append(self._parser.parse(context, title=title, item_type=Context))
        return self

    async def load_content(self, directories: Sequence[PathLike]) -> "Builder":
        """Load content directories into the content area."""
        self._logger.debug(f"Loading content from {list(directories)}")
        self.contents.append(await self._loader.load(directories, item_type=Content))
        return self

    async def load_context(self, directories: Sequence[PathLike]) -> "Builder":
        """Load context directories into the context area."""
        self._logger.debug(f"Loading context from {list(directories)}")
        self.contexts.append(await self._loader.load(directories, item_type=Context))
        return self

    async def build(self) -> Prompt:
        self._logger.debug("Building prompt")
        return Prompt(
            persona=self.persona,
            instructions=self.instructions,
            contents=self.contents,
            contexts=self.contexts,
        )
