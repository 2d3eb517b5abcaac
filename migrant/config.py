from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Self
import tomllib

from .parser import ParseOptions


CONFIG_FILE_NAME = "migrant.toml"


@dataclass(frozen=True)
class Config:
    config_file: Path
    directory: Path
    table: str = "migrations"
    line_separator: str = ""
    dsn: str = ""

    @property
    def parse_options(self) -> ParseOptions:
        return ParseOptions(line_separator=self.line_separator)

    @classmethod
    def from_file(cls, config_file: Path) -> Self:
        if not config_file.is_file():
            raise FileNotFoundError(f"No {config_file.name} file found at {config_file}")

        with config_file.open(mode="rb") as fp:
            config = tomllib.load(fp)

        # Get migrant section.
        try:
            section = config["migrant"]
        except KeyError:
            raise ValueError(f"Missing migrant section in {config_file}")

        directory = Path(section.get("directory", "migrations"))
        if not directory.is_absolute():
            directory = config_file.parent / directory

        return cls(
            config_file=config_file,
            directory=directory,
            table=section.get("table", "migrations"),
            line_separator=section.get("line_separator", ""),
            dsn=section.get("dsn", ""),
        )

    @classmethod
    def from_closest_parent(cls, directory: Optional[Path] = None) -> Self:
        directory = (directory or Path.cwd()).resolve()
        if not directory.is_dir():
            raise NotADirectoryError(f"{directory} is not a directory")

        # The closest config file wins.
        for candidate in [directory, *directory.parents]:
            if (config_file := candidate / CONFIG_FILE_NAME).is_file():
                with config_file.open(mode="rb") as fp:
                    if "migrant" in tomllib.load(fp):
                        return cls.from_file(config_file)
        raise FileNotFoundError(
            f"Found no {CONFIG_FILE_NAME} with a migrant section in {directory} or its parents."
        )
