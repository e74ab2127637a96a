import json
from os import environ
from pathlib import Path
from typing import Annotated, ClassVar

import typer
import yaml
from pydantic import Field
from pydantic.functional_validators import AfterValidator
from pydantic_settings import BaseSettings as DefaultBaseSettings, SettingsConfigDict

from canreg import __version__
from canreg.validators import http_base_url, string_or_path

APP_NAME = "canreg"
ENV_CONFIG_KEY = "CANREG_CONFIG_DIR"
CONFIG_FN = "config.yml"
APP_DIR = Path(typer.get_app_dir(APP_NAME))
APP_CFG = APP_DIR / CONFIG_FN

DEFAULT_API_BASE_URL = "http://134.209.193.115:8080"


def config_path(cfg_file: Path = APP_CFG) -> Path:
    """Config file location, `CANREG_CONFIG_DIR` takes precedence over `cfg_file`"""
    env_overwrite = environ.get(ENV_CONFIG_KEY)
    return Path(env_overwrite, CONFIG_FN) if env_overwrite else Path(cfg_file)


class BaseSettings(DefaultBaseSettings):
    model_config = SettingsConfigDict(extra="forbid", env_nested_delimiter="__")


StrOrPath = Annotated[Path, AfterValidator(string_or_path)]
BaseUrl = Annotated[str, AfterValidator(http_base_url)]


class Settings(BaseSettings):
    version: str = __version__
    config_format: ClassVar[str] = "yaml"
    model_config = SettingsConfigDict(extra="forbid", env_prefix="CANREG_")

    # Registration API, the `/canisters` routes are appended to this
    api_base_url: BaseUrl = DEFAULT_API_BASE_URL

    # not serialized
    file_path: StrOrPath | None = Field(
        description="File path where this is stored", default=None
    )

    def to_json(self) -> str:
        return json.dumps(
            self.model_dump(mode="json", exclude_none=True, exclude={"file_path"}),
            indent=2,
        )

    def to_yaml(self):
        return yaml.safe_dump(
            self.model_dump(mode="json", exclude_none=True, exclude={"file_path"})
        )

    def dump(self):
        return getattr(self, f"to_{self.config_format}")()

    def save(self, config_path: None | Path = None):
        """Save the current configuration to `config_path` or the file it was loaded from"""
        path = config_path or self.file_path
        if not path:
            raise FileNotFoundError("config file path not set")
        path.write_text(self.dump())

    @classmethod
    def load(cls):
        """Settings from the cli config file if there is one, defaults otherwise"""
        path = config_path()
        if path.is_file():
            return cls.from_file(path)
        return cls()

    @classmethod
    def from_file(cls, file_path: Path | str):
        file_path = Path(file_path) if isinstance(file_path, str) else file_path
        data = yaml.safe_load(file_path.read_text()) or {}
        if "file_path" in cls.model_fields:
            data["file_path"] = str(file_path)
        return cls.model_validate(data)
